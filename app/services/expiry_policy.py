# app/services/expiry_policy.py
from datetime import datetime, timedelta

from app.domain.schemas import CartSettings


def compute_expires_at(settings: CartSettings, now: datetime) -> datetime | None:
    """Expiration for a cart touched at `now`; None means the cart never expires."""
    if settings.permanent_cart:
        return None
    return now + timedelta(hours=settings.cart_ttl_hours)


def warning_window_exceeds_lifetime(settings: CartSettings) -> bool:
    # with such a window the warning goes out as soon as the cart is created
    if settings.permanent_cart:
        return False
    return settings.expiry_warning_minutes >= settings.cart_ttl_hours * 60
