# app/services/cart_warning_service.py
from datetime import datetime, timedelta

from app.data.models.cart import CartModel
from app.domain.schemas import (
    DEFAULT_USER_NAME,
    CartSettings,
    ExpiryWarningEmail,
    ExpiryWarningSms,
    WarningSummary,
)
from app.repos.cart_repo import CartRepo
from app.repos.settings_repo import SettingsRepo
from app.services.expiry_policy import warning_window_exceeds_lifetime
from app.services.notification_service import NotificationService
from app.utils.clock import as_utc, utcnow
from app.utils.logging import get_logger

logger = get_logger(__name__)

# (cart_ttl_hours, expiry_warning_minutes) pairs already logged by this process
_reported_windows: set[tuple[float, int]] = set()


def _report_window_exceeding_lifetime(settings: CartSettings) -> None:
    key = (settings.cart_ttl_hours, settings.expiry_warning_minutes)
    message = (
        f"[CART_WARNING] Warning window of {settings.expiry_warning_minutes} min is not "
        f"shorter than the cart lifetime of {settings.cart_ttl_hours} h, "
        "warnings will go out right after carts are created"
    )
    if key in _reported_windows:
        logger.debug(message)
        return
    _reported_windows.add(key)
    logger.warning(message)


class CartExpiryWarningService:
    """
    Sends one email and/or SMS per warning cycle to owners of carts that
    expire within the configured window.

    A cart is marked as warned once both channels were attempted, whatever
    their outcome. If marking fails the cart can be warned again next run.
    """

    def __init__(
        self,
        repo: CartRepo,
        settings_repo: SettingsRepo,
        notifier: NotificationService,
    ):
        self.repo = repo
        self.settings_repo = settings_repo
        self.notifier = notifier

    def run(self, now: datetime | None = None) -> WarningSummary:
        try:
            return self._send_warnings(now or utcnow())
        except Exception as e:
            logger.exception("[CART_WARNING] Critical error")
            return WarningSummary(error=str(e))

    def _send_warnings(self, now: datetime) -> WarningSummary:
        settings = self.settings_repo.get_cart_settings()

        if not settings.expiry_warning_enabled:
            # runs every minute, keep it quiet
            logger.debug("[CART_WARNING] Expiry warnings disabled")
            return WarningSummary(enabled=False)

        if warning_window_exceeds_lifetime(settings):
            _report_window_exceeding_lifetime(settings)

        threshold = now + timedelta(minutes=settings.expiry_warning_minutes)
        carts = self.repo.find_near_expiry(now, threshold)

        summary = WarningSummary(found=len(carts))
        if not carts:
            return summary

        logger.info(f"[CART_WARNING] Found {len(carts)} carts near expiry")

        for cart in carts:
            try:
                if self._warn_cart(cart, settings, now, summary):
                    summary.processed += 1
            except Exception as e:
                logger.error(f"[CART_WARNING] Error processing cart {cart.id}: {e}")

        logger.info(
            f"[CART_WARNING] Completed: {summary.processed} carts processed, "
            f"{summary.emails_sent} emails sent, {summary.sms_sent} SMS sent"
        )
        return summary

    def _warn_cart(
        self,
        cart: CartModel,
        settings: CartSettings,
        now: datetime,
        summary: WarningSummary,
    ) -> bool:
        user = cart.user
        if user is None:
            logger.info(f"[CART_WARNING] Cart {cart.id} has no user, skipping")
            return False

        minutes_remaining = int((as_utc(cart.expires_at) - now).total_seconds() // 60)
        user_name = user.name or DEFAULT_USER_NAME
        item_count = len(cart.items)

        if settings.email_enabled and user.email:
            try:
                sent = self.notifier.send_expiry_warning_email(
                    user.email,
                    ExpiryWarningEmail(
                        user_name=user_name,
                        item_count=item_count,
                        total_price=cart.total_price or 0,
                        expiry_minutes=minutes_remaining,
                        is_warning=True,
                    ),
                )
                if sent:
                    summary.emails_sent += 1
                else:
                    logger.warning(f"[CART_WARNING] Email for cart {cart.id} was not sent")
            except Exception as e:
                logger.error(f"[CART_WARNING] Error sending email for cart {cart.id}: {e}")

        if settings.sms_enabled and user.mobile:
            try:
                sent = self.notifier.send_expiry_warning_sms(
                    user.mobile,
                    ExpiryWarningSms(
                        user_name=user_name,
                        item_count=item_count,
                        expiry_minutes=minutes_remaining,
                        is_warning=True,
                    ),
                )
                if sent:
                    summary.sms_sent += 1
                else:
                    logger.warning(f"[CART_WARNING] SMS for cart {cart.id} was not sent")
            except Exception as e:
                logger.error(f"[CART_WARNING] Error sending SMS for cart {cart.id}: {e}")

        if not self.repo.mark_warned(cart.id):
            logger.error(f"[CART_WARNING] Cart {cart.id} not marked as warned, it may be warned again")
        return True
