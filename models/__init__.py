from models.users import User
from models.refresh_tokens import RefreshToken
from models.products import Product
from models.product_images import ProductImage
from models.stocks import Stock
from models.orders import Order
from models.order_items import OrderItem

__all__ = ["User", "RefreshToken", "Product", "ProductImage", "Stock", "Order", "OrderItem"]
