# app/services/notification_service.py
from app.domain.schemas import ExpiryWarningEmail, ExpiryWarningSms
from app.services.email_client import EmailClient
from app.services.sms_client import SmsClient
from app.utils.logging import get_logger
from app.utils.settings import FRONTEND_URL, STORE_NAME

logger = get_logger(__name__)


def _format_price(value) -> str:
    return f"{int(value):,}"


class NotificationService:
    """
    Outbound expiry warnings.
    Each method returns True when the provider accepted the message, False when
    the channel is not configured or the provider refused it. Transport errors
    are raised to the caller.
    """

    def __init__(self, email_client: EmailClient | None = None, sms_client: SmsClient | None = None):
        self.email_client = email_client or EmailClient()
        self.sms_client = sms_client or SmsClient()

    def send_expiry_warning_email(self, address: str, data: ExpiryWarningEmail) -> bool:
        subject = f"سبد خرید شما در {STORE_NAME} به زودی منقضی می‌شود"
        html = f"""
        <div dir="rtl" style="font-family: Tahoma, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
          <h2 style="color: #333; text-align: center;">سلام {data.user_name}!</h2>
          <p style="color: #555; font-size: 14px;">
            سبد خرید شما با {data.item_count} کالا و مبلغ {_format_price(data.total_price)} تومان
            تا {data.expiry_minutes} دقیقه دیگر منقضی می‌شود.
          </p>
          <p style="color: #555; font-size: 14px;">
            برای نهایی کردن سفارش، قبل از پایان مهلت به سبد خرید خود مراجعه کنید.
          </p>
          <div style="text-align: center; margin-top: 30px;">
            <a href="{FRONTEND_URL}/cart"
               style="background-color: #1890ff; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px;">
              مشاهده سبد خرید
            </a>
          </div>
          <p style="color: #999; font-size: 12px; text-align: center; margin-top: 30px;">
            با تشکر، تیم {STORE_NAME}
          </p>
        </div>
        """
        sent = self.email_client.send(address, subject, html)
        if sent:
            logger.info(f"[NOTIFICATION] Expiry warning email sent to {address}")
        return sent

    def send_expiry_warning_sms(self, mobile: str, data: ExpiryWarningSms) -> bool:
        text = (
            f"{data.user_name} عزیز، سبد خرید شما ({data.item_count} کالا) "
            f"تا {data.expiry_minutes} دقیقه دیگر منقضی می‌شود.\n{STORE_NAME}\nلغو11"
        )
        sent = self.sms_client.send(mobile, text)
        if sent:
            logger.info(f"[NOTIFICATION] Expiry warning SMS sent to {mobile}")
        return sent
