from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    # unit price at the moment the product was added
    price = Column(Numeric(12, 2), nullable=False)

    cart = relationship("CartModel", back_populates="items")
