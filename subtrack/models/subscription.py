"""
Subscription Models

These models define the shape of a tracked subscription and of the
derived values the billing core produces from a collection of them.

DESIGN DECISION: Subscription records are frozen. The core never mutates
a record; renewal produces a NEW record with the same id, and persisting
it is the store's job.

DESIGN DECISION: Optional fields that arrive malformed are normalized,
not rejected:
- Unparseable dates become None ("no schedule")
- Unknown or missing currencies become the base currency
- Unknown cycles become OTHER (no recurring contribution)
- Unknown or missing category groups become CategoryGroup.OTHER
Only structural errors (missing id/name, negative price) fail validation.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from subtrack.dates import parse_iso_date
from subtrack.models.currency import BASE_CURRENCY, CurrencyCode


# =============================================================================
# ENUMS
# =============================================================================

class BillingCycle(str, Enum):
    """
    Recurrence pattern of a subscription's charge.

    LIFETIME and OTHER never contribute to monthly/yearly spend and
    never advance a due date.
    """
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"
    OTHER = "other"

    @property
    def months(self) -> int:
        """Calendar months per billing period (0 for non-recurring)."""
        if self is BillingCycle.MONTHLY:
            return 1
        if self is BillingCycle.QUARTERLY:
            return 3
        if self is BillingCycle.YEARLY:
            return 12
        if self in (BillingCycle.LIFETIME, BillingCycle.OTHER):
            return 0
        raise ValueError(f"Unhandled billing cycle: {self!r}")

    @property
    def is_recurring(self) -> bool:
        return self.months > 0


class CategoryGroup(str, Enum):
    """
    Top-level grouping shown as filter chips on the statistics screen.

    The set is closed: anything outside it is filed under OTHER.
    """
    ENTERTAINMENT = "影音娱乐"
    WORK = "工作"
    LIFE = "生活"
    OTHER = "其他"

    @classmethod
    def normalize(cls, value: Any) -> "CategoryGroup":
        """Map a stored label (or member name) onto the closed set."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            label = value.strip()
            try:
                return cls(label)
            except ValueError:
                return cls.__members__.get(label.upper(), cls.OTHER)
        return cls.OTHER


# =============================================================================
# SUBSCRIPTION
# =============================================================================

class Subscription(BaseModel):
    """
    A single tracked subscription.

    Field names are snake_case; the camelCase names used by the app's
    JSON export (nextDueISO, startISO, autoRenew, ...) are accepted on
    input and produced by to_export_dict().
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    # Identity
    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )

    # Grouping (used only for filtering)
    category: Optional[str] = Field(
        default=None,
        description="Free-text label, e.g. the plan or product tier"
    )
    category_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("category_id", "categoryId"),
        serialization_alias="categoryId",
    )
    group: CategoryGroup = Field(
        default=CategoryGroup.OTHER,
        validation_alias=AliasChoices("group", "categoryGroup"),
        serialization_alias="categoryGroup",
    )

    # Pricing
    price: Decimal = Field(
        ...,
        ge=0,
        description="Price per billing period, in `currency`"
    )
    currency: CurrencyCode = Field(
        default=BASE_CURRENCY,
        description="Currency the price is denominated in"
    )
    cycle: BillingCycle = Field(
        ...,
        description="Billing cycle"
    )

    # Schedule
    start_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("start_date", "startISO"),
        serialization_alias="startISO",
        description="Date the subscription started"
    )
    next_due_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("next_due_date", "nextDueISO"),
        serialization_alias="nextDueISO",
        description="Next charge date; None means no schedule"
    )
    auto_renew: bool = Field(
        default=False,
        validation_alias=AliasChoices("auto_renew", "autoRenew"),
        serialization_alias="autoRenew",
    )

    payment_method_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("payment_method_id", "paymentMethodId"),
        serialization_alias="paymentMethodId",
    )

    @field_validator("price", mode="before")
    @classmethod
    def price_from_float(cls, v: Any) -> Any:
        """Go through str() so 9.99 stays 9.99 rather than its binary expansion."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: Any) -> CurrencyCode:
        """Unknown or missing currencies fall back to the base currency."""
        if isinstance(v, CurrencyCode):
            return v
        if isinstance(v, str):
            try:
                return CurrencyCode(v.strip().upper())
            except ValueError:
                return BASE_CURRENCY
        return BASE_CURRENCY

    @field_validator("group", mode="before")
    @classmethod
    def normalize_group(cls, v: Any) -> CategoryGroup:
        return CategoryGroup.normalize(v)

    @field_validator("cycle", mode="before")
    @classmethod
    def normalize_cycle(cls, v: Any) -> BillingCycle:
        if isinstance(v, BillingCycle):
            return v
        if isinstance(v, str):
            try:
                return BillingCycle(v.strip().lower())
            except ValueError:
                return BillingCycle.OTHER
        return BillingCycle.OTHER

    @field_validator("start_date", "next_due_date", mode="before")
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        """Unparseable dates are treated as absent, not as errors."""
        return parse_iso_date(v)

    @field_validator("auto_renew", mode="before")
    @classmethod
    def none_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_serializer("price", when_used="json")
    def price_as_number(self, price: Decimal) -> float:
        return float(price)

    def with_next_due_date(self, next_due_date: Optional[date]) -> "Subscription":
        """Copy of this record with a new due date (same identity)."""
        return self.model_copy(update={"next_due_date": next_due_date})

    def to_export_dict(self) -> dict:
        """
        Convert to the JSON shape used by the app's export `subscriptions` array.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# DERIVED VALUES
# =============================================================================

class PortfolioSummary(BaseModel):
    """
    Portfolio-level totals for the overview cards.

    All money values are in `display_currency`, rounded to its precision.
    """
    model_config = ConfigDict(frozen=True)

    display_currency: CurrencyCode
    reference_date: date = Field(
        ...,
        description="'Today' the summary was computed for"
    )
    total_count: int = Field(ge=0)
    monthly_spend: Decimal = Field(
        ...,
        description="Spend attributed to the reference month"
    )
    yearly_spend: Decimal = Field(
        ...,
        description="Spend attributed to the reference year"
    )
    window_days: int = Field(
        ...,
        ge=0,
        description="Look-ahead window for due_within_days"
    )
    due_within_days: int = Field(
        ...,
        ge=0,
        description="Subscriptions due in [0, window_days] days"
    )
    group: Optional[CategoryGroup] = Field(
        default=None,
        description="Group filter the totals were computed for (None = all)"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category filter the totals were computed for (None = all)"
    )


class UpcomingRenewal(BaseModel):
    """One row of the 'upcoming renewals' list."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    cycle: BillingCycle
    next_due_date: date
    days_until: int
    price_label: str = Field(
        ...,
        description="Original price, plus the converted price when currencies differ"
    )
