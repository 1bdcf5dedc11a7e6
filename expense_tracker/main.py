import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .controllers import budgets, categories, dashboard, expenses, notifications, reports
from .database import engine, Base, SessionLocal
from .exceptions import ExpenseTrackerError
from .services.categories import seed_system_categories

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Expense Tracker API")

# Explicit origins required when allow_credentials=True
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ExpenseTrackerError)
async def expense_tracker_error_handler(request: Request, exc: ExpenseTrackerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Create database tables and the default categories
Base.metadata.create_all(bind=engine)
with SessionLocal() as db:
    seed_system_categories(db)

# Include routers
app.include_router(budgets.router, prefix="/api/budgets", tags=["budgets"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
