"""
Ledger Chat - Conversational Personal Finance Agent
Main FastAPI Application

Record transactions, check your balance and get spending insights by
chatting in plain English.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from config import settings
from services import RetrievalError, GENERIC_FAILURE_MESSAGE
from routes import (
    chat_router,
    transactions_router,
    budgets_router,
    insights_router,
    database_router,
)


logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("ledger_chat")


# Initialize FastAPI app
app = FastAPI(
    title="Ledger Chat",
    description="Conversational personal finance agent",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware for frontend
allowed_origins_list = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(chat_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(insights_router)
app.include_router(database_router)


# ==================== EXCEPTION HANDLERS ====================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with user-friendly messages."""
    error_messages = []

    for error in exc.errors():
        field = error.get("loc", ["", ""])[-1]
        error_type = error.get("type", "")

        if field == "amount" and "greater_than" in error_type:
            error_messages.append("Amount must be greater than 0")
        elif field in ("description", "category", "message") and "too_short" in error_type:
            error_messages.append(f"{str(field).capitalize()} must not be empty")
        elif "missing" in error_type:
            error_messages.append(f"Field {field} is required")
        else:
            error_messages.append(f"Field {field} is invalid")

    return JSONResponse(
        status_code=422,
        content={"detail": "; ".join(error_messages) if error_messages else "Invalid data"}
    )


@app.exception_handler(RetrievalError)
async def retrieval_exception_handler(request: Request, exc: RetrievalError):
    """Datastore failures never leak their internal message."""
    logger.error("Unhandled retrieval failure in %s: %s", exc.operation, exc)
    return JSONResponse(status_code=500, content={"detail": GENERIC_FAILURE_MESSAGE})


# ==================== HEALTH CHECK ====================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": "Ledger Chat",
        "version": "1.0.0"
    }


# ==================== STARTUP/SHUTDOWN ====================

@app.on_event("startup")
async def startup_event():
    logger.info("Ledger Chat starting up...")
    if settings.debug:
        logger.info("Debug mode: %s", settings.debug)
        logger.info("Agent model: %s (timeout %.0fs)", settings.agent_model, settings.model_timeout_seconds)
    else:
        logger.info("Running in production mode")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Ledger Chat shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
