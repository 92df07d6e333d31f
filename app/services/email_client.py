# app/services/email_client.py
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.utils.logging import get_logger
from app.utils import settings

logger = get_logger(__name__)


class EmailClient:
    """SMTP with STARTTLS. Transport errors propagate to the caller."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        timeout: int | None = None,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.sender = sender or settings.EMAIL_FROM
        self.timeout = timeout or settings.SMTP_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    def send(self, to_email: str, subject: str, html_body: str) -> bool:
        if not self.configured:
            logger.warning(f"SMTP credentials missing, not sending '{subject}' to {to_email}")
            return False

        msg = MIMEMultipart()
        msg["From"] = f"{settings.STORE_NAME} <{self.sender}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)

        return True
