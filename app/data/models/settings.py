from sqlalchemy import Boolean, Column, Float, Integer, String

from app.data.database import Base

MAIN_SETTINGS_KEY = "main_settings"


class SettingsModel(Base):
    """Store-wide settings, one row keyed by singleton_key."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    singleton_key = Column(String(50), nullable=False, unique=True, default=MAIN_SETTINGS_KEY)

    cart_ttl_hours = Column(Float, nullable=True, default=1.0)
    permanent_cart = Column(Boolean, nullable=True, default=False)
    expiry_warning_enabled = Column(Boolean, nullable=True, default=False)
    expiry_warning_minutes = Column(Integer, nullable=True, default=30)
    notification_type = Column(String(10), nullable=True, default="both")
