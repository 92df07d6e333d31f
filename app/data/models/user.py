from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.data.database import Base


class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    mobile = Column(String(20), nullable=True)

    carts = relationship("CartModel", back_populates="user")
