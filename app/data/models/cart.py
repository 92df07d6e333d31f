#app/data/models/cart.py
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.data.database import Base

CART_ACTIVE = "active"
CART_EXPIRED = "expired"


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # null for guest carts
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    status = Column(String(20), nullable=False, default=CART_ACTIVE, index=True)
    # mirror of status, is_expired == (status == "expired")
    is_expired = Column(Boolean, nullable=False, default=False)
    total_price = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    # null = permanent cart
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    expiry_warning_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("UserModel", back_populates="carts")
    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    def mark_expired(self) -> None:
        self.status = CART_EXPIRED
        self.is_expired = True
        self.items = []
        self.total_price = Decimal("0.00")
