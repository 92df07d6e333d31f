from typing import Any, Dict

from sqlalchemy.orm import Session

from app.data.models.cart import CART_ACTIVE, CartModel
from app.repos.cart_repo import CartRepo
from app.repos.settings_repo import SettingsRepo
from app.services.expiry_policy import compute_expires_at
from app.utils.clock import as_utc, utcnow
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart reads and expiration renewal.
    Renewing a cart pushes expires_at forward under the current settings and
    opens a new warning cycle.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.settings_repo = SettingsRepo(db)

    @staticmethod
    def _to_dict(cart: CartModel) -> Dict[str, Any]:
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "is_expired": cart.is_expired,
            "items": [
                {
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "price": i.price,
                }
                for i in cart.items
            ],
            "total_price": cart.total_price,
            "expires_at": as_utc(cart.expires_at),
            "expiry_warning_sent": cart.expiry_warning_sent,
        }

    #query
    def get_cart(self, cart_id: int) -> Dict[str, Any] | None:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            return None
        return self._to_dict(cart)

    #command
    def renew_expiry(self, cart_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart(cart_id)

        if not cart:
            raise LookupError("Cart does not exist")

        if cart.status != CART_ACTIVE:
            raise ValueError("Expired carts cannot be renewed")

        settings = self.settings_repo.get_cart_settings()
        expires_at = compute_expires_at(settings, utcnow())

        if not self.repo.renew_expiry(cart_id, expires_at):
            raise RuntimeError(f"Could not renew cart {cart_id}")

        logger.info(f"Cart {cart_id} renewed until {expires_at or 'never'}")

        self.repo.db.refresh(cart)
        return self._to_dict(cart)
