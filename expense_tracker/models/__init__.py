from .budget import (
    Budget,
    Category,
    Expense,
    PAYMENT_METHODS,
    utc_now,
)
from .notification import Notification, NOTIFICATION_TYPES
