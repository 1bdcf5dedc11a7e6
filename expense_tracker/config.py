# config.py
"""Environment-driven settings for the expense tracker API."""

import os
from decimal import Decimal

from dotenv import load_dotenv

# Load environment variables from the .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None

# Upper bound for the budget alert path; the originating write never waits longer.
ALERT_TIMEOUT_SECONDS = float(os.getenv("ALERT_TIMEOUT_SECONDS", "5"))

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

ADMIN_ROLE = "Admin"


def format_money(amount: Decimal) -> str:
    """Render an amount with the configured currency symbol, e.g. '₹1,250.00'."""
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
