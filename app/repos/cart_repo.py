# app/repos/cart_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.data.models.cart import CART_ACTIVE, CART_EXPIRED, CartModel
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Cart store used by the expiry sweeps.
    Writes touch a single cart and report failure as False instead of raising.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def find_expired_active(self, now: datetime) -> List[CartModel]:
        stmt = select(CartModel).where(
            CartModel.status == CART_ACTIVE,
            CartModel.is_expired.is_not(True),
            CartModel.expires_at <= now,
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_near_expiry(self, now: datetime, threshold: datetime) -> List[CartModel]:
        stmt = (
            select(CartModel)
            .options(joinedload(CartModel.user), selectinload(CartModel.items))
            .where(
                CartModel.status == CART_ACTIVE,
                CartModel.is_expired.is_(False),
                CartModel.expiry_warning_sent.is_(False),
                CartModel.expires_at > now,
                CartModel.expires_at <= threshold,
            )
        )
        return list(self.db.execute(stmt).scalars().unique().all())

    def save(self, cart: CartModel) -> bool:
        cart_id = cart.id
        try:
            self.db.add(cart)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save cart {cart_id}: {e}")
            return False

    def mark_warned(self, cart_id: int) -> bool:
        try:
            result = self.db.execute(
                update(CartModel)
                .where(CartModel.id == cart_id)
                .values(expiry_warning_sent=True)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to mark cart {cart_id} as warned: {e}")
            return False
        return result.rowcount > 0

    def renew_expiry(self, cart_id: int, expires_at: datetime | None) -> bool:
        # a new expiration starts a new warning cycle
        try:
            result = self.db.execute(
                update(CartModel)
                .where(CartModel.id == cart_id, CartModel.status == CART_ACTIVE)
                .values(expires_at=expires_at, expiry_warning_sent=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to renew expiry of cart {cart_id}: {e}")
            return False
        return result.rowcount > 0

    def count_by_state(self, now: datetime, threshold: datetime) -> dict:
        def count(*criteria) -> int:
            return self.db.execute(
                select(func.count()).select_from(CartModel).where(*criteria)
            ).scalar_one()

        return {
            "active": count(CartModel.status == CART_ACTIVE),
            "expired": count(CartModel.status == CART_EXPIRED),
            "expiring_soon": count(
                CartModel.status == CART_ACTIVE,
                CartModel.expiry_warning_sent.is_(False),
                CartModel.expires_at > now,
                CartModel.expires_at <= threshold,
            ),
            "warned": count(
                CartModel.status == CART_ACTIVE,
                CartModel.expiry_warning_sent.is_(True),
            ),
        }
