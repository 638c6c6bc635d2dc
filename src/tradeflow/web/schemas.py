"""Pydantic request bodies for the journal API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from tradeflow.models import TradeInput


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    account_type: Literal["Live", "Prop", "Demo"] = "Prop"
    initial_balance: float = Field(ge=0)
    max_daily_loss: float | None = Field(default=None, ge=0)
    max_drawdown: float | None = Field(default=None, ge=0)
    is_trailing_drawdown: bool = False

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class AccountUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    max_daily_loss: float | None = Field(default=None, ge=0)
    max_drawdown: float | None = Field(default=None, ge=0)
    is_trailing_drawdown: bool = False

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class PnlPreview(BaseModel):
    symbol: str = Field(min_length=1)
    direction: Literal["LONG", "SHORT"]
    entry_price: float
    exit_price: float
    quantity: int = Field(default=1, gt=0)
    commission: float = Field(default=0.0, ge=0)
    fees: float = Field(default=0.0, ge=0)


class TradeFields(PnlPreview):
    entry_time: datetime | None = None  # Defaults to now when omitted
    exit_time: datetime | None = None
    stop_loss: float | None = None
    is_break_even: bool = False

    def to_input(self, now: datetime | None = None) -> TradeInput:
        now = now or datetime.now(timezone.utc)
        return TradeInput(
            symbol=self.symbol,
            direction=self.direction,
            entry_price=self.entry_price,
            exit_price=self.exit_price,
            quantity=self.quantity,
            entry_time=self.entry_time or now,
            exit_time=self.exit_time or now,
            commission=self.commission,
            fees=self.fees,
            stop_loss=self.stop_loss,
            is_break_even=self.is_break_even,
        )


class TradeCreate(TradeFields):
    account_id: str = Field(min_length=1)


class TradeUpdate(TradeFields):
    pass
