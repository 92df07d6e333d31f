# app/repos/settings_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.settings import MAIN_SETTINGS_KEY, SettingsModel
from app.domain.schemas import CartSettings
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WARNING_MINUTES = 30


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_main_settings(self) -> SettingsModel | None:
        return self.db.execute(
            select(SettingsModel).where(SettingsModel.singleton_key == MAIN_SETTINGS_KEY)
        ).scalar_one_or_none()

    def get_cart_settings(self) -> CartSettings:
        """
        Never raises: if the settings row cannot be read or is invalid the
        warning sweep gets a disabled configuration.
        """
        try:
            row = self.get_main_settings()
            if row is None:
                return CartSettings()

            return CartSettings(
                cart_ttl_hours=row.cart_ttl_hours or 1.0,
                permanent_cart=bool(row.permanent_cart),
                expiry_warning_enabled=bool(row.expiry_warning_enabled),
                expiry_warning_minutes=row.expiry_warning_minutes or DEFAULT_WARNING_MINUTES,
                notification_type=row.notification_type or "both",
            )
        except Exception:
            logger.exception("Error fetching cart settings, expiry warnings disabled")
            self.db.rollback()
            return CartSettings(expiry_warning_enabled=False)
