"""
Typed payloads returned by the Flow Sight REST backend.

The backend owns these records; the client only reads them and passes them
through. Amounts are integer minor units (value / 100 = yen).
Unknown fields are ignored so backend additions do not break the client.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ProjectionDetail(ApiModel):
    type: Literal["income", "recurring_payment", "card_payment"]
    description: str
    amount: int


class DailyProjection(ApiModel):
    """One day of the backend's cashflow projection."""
    date: str
    income: int = Field(ge=0)
    expense: int = Field(ge=0)
    balance: int
    details: List[ProjectionDetail] = Field(default_factory=list)

    @field_validator("details", mode="before")
    @classmethod
    def _null_details(cls, v):
        return [] if v is None else v


class BankAccount(ApiModel):
    id: str
    user_id: Optional[str] = None
    name: str
    balance: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreditCard(ApiModel):
    id: str
    name: str
    bank_account: str
    closing_day: Optional[int] = None
    payment_day: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Asset(ApiModel):
    id: str
    user_id: Optional[str] = None
    name: str
    asset_type: Literal["card", "loan"]
    bank_account: str
    closing_day: Optional[int] = None
    payment_day: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CardMonthlyTotal(ApiModel):
    id: str
    asset_id: str
    year_month: str
    total_amount: int
    is_confirmed: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class IncomeSource(ApiModel):
    id: str
    user_id: Optional[str] = None
    name: str
    income_type: Literal["monthly_fixed", "one_time"]
    base_amount: int
    bank_account: str
    is_active: bool = True
    scheduled_year_month: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MonthlyIncomeRecord(ApiModel):
    id: str
    income_source_id: str
    year_month: str
    actual_amount: int
    is_confirmed: bool = False
    note: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RecurringPayment(ApiModel):
    id: str
    user_id: Optional[str] = None
    name: str
    amount: int
    payment_day: int
    bank_account: str
    start_year_month: str
    total_payments: Optional[int] = None
    remaining_payments: Optional[int] = None
    is_active: bool = True
    note: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AppSetting(ApiModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    key: str
    value: str


class DashboardSummary(ApiModel):
    total_balance: int
    monthly_income: int
    monthly_expense: int
    total_assets: int
    recent_activities: List[DailyProjection] = Field(default_factory=list)

    @field_validator("recent_activities", mode="before")
    @classmethod
    def _coerce_activities(cls, v):
        # older backends send null or an object here
        return v if isinstance(v, list) else []


class User(ApiModel):
    id: str
    email: str
    name: str = ""
    picture: str = ""
