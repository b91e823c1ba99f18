"""SQLModel table exports."""

from .customer import Customer
from .invoice import Invoice
from .order import Order
from .quote import Quote
from .user import User

__all__ = [
    "Customer",
    "Invoice",
    "Order",
    "Quote",
    "User",
]
