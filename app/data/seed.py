# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal, init_db
from app.data.models import CartItemModel, CartModel, SettingsModel, UserModel
from app.repos.settings_repo import SettingsRepo
from app.services.expiry_policy import compute_expires_at
from app.utils.clock import utcnow


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(SettingsModel).first():
            return

        db.add(SettingsModel(expiry_warning_enabled=True, expiry_warning_minutes=30))
        db.commit()

        user = UserModel(name="کاربر نمونه", email="demo@example.com", mobile="09120000000")
        cart = CartModel(
            user=user,
            expires_at=compute_expires_at(SettingsRepo(db).get_cart_settings(), utcnow()),
            items=[CartItemModel(product_id=1, quantity=2, price=Decimal("150000"))],
            total_price=Decimal("300000"),
        )
        db.add(cart)
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
