# handler.py
"""AWS Lambda entry point for the expense tracker API.

API Gateway events are adapted to ASGI by Mangum. Tables and the system
categories are set up when expense_tracker.main is imported, i.e. on cold start.
"""

from mangum import Mangum
from expense_tracker.main import app

# No ASGI lifespan under Lambda
handler = Mangum(app, lifespan="off")
