# import every model so SQLAlchemy registers it in Base.metadata

from app.data.models.user import UserModel
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.settings import SettingsModel

__all__ = ["UserModel", "CartModel", "CartItemModel", "SettingsModel"]
