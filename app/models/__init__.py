"""SQLAlchemy models for the resort front desk.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from app.models.booking import Booking
from app.models.transaction import Transaction

__all__ = [
    "Booking",
    "Transaction",
]
