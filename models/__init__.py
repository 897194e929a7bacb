from models.users import User
from models.admins import Admin
from models.verification_codes import VerificationCode
from models.refresh_tokens import RefreshToken
from models.products import Product
from models.orders import Order
from models.payments import Payment
from models.contents import Content

__all__ = ["User", "Admin", "VerificationCode", "RefreshToken", "Product", "Order", "Payment", "Content"]
