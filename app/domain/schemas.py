# app/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_NAME = "کاربر"


class NotificationType(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    BOTH = "both"


class CartSettings(BaseModel):
    """Cart section of the store settings."""

    cart_ttl_hours: float = Field(1.0, ge=0.5, le=168)
    permanent_cart: bool = False
    expiry_warning_enabled: bool = False
    expiry_warning_minutes: int = Field(30, ge=5, le=120)
    notification_type: NotificationType = NotificationType.BOTH

    @property
    def email_enabled(self) -> bool:
        return self.notification_type in (NotificationType.EMAIL, NotificationType.BOTH)

    @property
    def sms_enabled(self) -> bool:
        return self.notification_type in (NotificationType.SMS, NotificationType.BOTH)


class ExpiryWarningSms(BaseModel):
    """Facts carried by an expiry warning SMS."""

    user_name: str = DEFAULT_USER_NAME
    item_count: int = 0
    expiry_minutes: int
    is_warning: bool = True


class ExpiryWarningEmail(ExpiryWarningSms):
    """Email warnings also show the cart total."""

    total_price: Decimal = Decimal("0.00")


class CleanupSummary(BaseModel):
    found: int = 0
    cleaned: int = 0
    failed: int = 0
    skipped: bool = False
    error: str | None = None


class WarningSummary(BaseModel):
    found: int = 0
    processed: int = 0
    emails_sent: int = 0
    sms_sent: int = 0
    enabled: bool = True
    error: str | None = None


class CartItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Cart view with its expiry metadata."""

    cart_id: int
    user_id: int | None = None
    status: str
    is_expired: bool
    items: List[CartItemOut]
    total_price: Decimal
    expires_at: datetime | None = None
    expiry_warning_sent: bool


class CartStatsOut(BaseModel):
    active: int
    expired: int
    expiring_soon: int
    warned: int
