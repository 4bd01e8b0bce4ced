"""ORM models exposed for easy imports."""

from .customer import Customer
from .invoice import INVOICE_STATUSES, Invoice
from .revenue import Revenue

__all__ = [
    "Customer",
    "INVOICE_STATUSES",
    "Invoice",
    "Revenue",
]
