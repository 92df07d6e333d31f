# app/services/sms_client.py
import requests

from app.utils.logging import get_logger
from app.utils.retry import http_retry
from app.utils.settings import SMS_API_URL, SMS_PASSWORD, SMS_SENDER_NUMBER, SMS_USERNAME

logger = get_logger(__name__)

# Melipayamak RetStatus for an accepted message
RET_STATUS_OK = 1


class SmsClient:
    """Melipayamak REST gateway (username/password auth)."""

    def __init__(
        self,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        timeout: int = 15,
    ):
        self.url = url or SMS_API_URL
        self.username = username if username is not None else SMS_USERNAME
        self.password = password if password is not None else SMS_PASSWORD
        self.sender = sender if sender is not None else SMS_SENDER_NUMBER
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    def send(self, mobile: str, text: str) -> bool:
        if not self.configured:
            logger.warning(f"SMS gateway credentials missing, not sending to {mobile}")
            return False

        data = self._post(
            {
                "username": self.username,
                "password": self.password,
                "to": mobile,
                "from": self.sender or self.username,
                "text": text,
                "isflash": False,
            }
        )

        if data.get("RetStatus") == RET_STATUS_OK:
            return True

        logger.error(f"SMS to {mobile} rejected: {data.get('StrRetStatus')}")
        return False

    @http_retry()
    def _post(self, payload: dict) -> dict:
        logger.info(f"SmsClient POST {self.url} to {payload['to']}")

        resp = requests.post(self.url, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()
