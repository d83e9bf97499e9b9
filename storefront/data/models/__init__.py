#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.order import OrderModel
from storefront.data.models.product import ProductModel
from storefront.data.models.setting import SettingModel
from storefront.data.models.user import ProfileModel, UserRoleModel
from storefront.data.models.contact_message import ContactMessageModel

__all__ = [
    "OrderModel",
    "ProductModel",
    "SettingModel",
    "ProfileModel",
    "UserRoleModel",
    "ContactMessageModel",
]
