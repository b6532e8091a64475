from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fraud_scoring.config import settings
from fraud_scoring.database import close_connection, init_db
from fraud_scoring.exceptions import ConflictError, NotFoundError, UnsupportedCurrencyError
from fraud_scoring.logging_config import setup_logging

setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    close_connection()


app = FastAPI(
    title="Fraud Scoring API",
    description="Real-time transaction fraud scoring with auto-action thresholds and manual review",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": str(exc), "current_status": exc.current_status},
    )


# Request validation already rejects unknown currency codes with 422; this
# covers UnsupportedCurrencyError raised by direct callers of the service layer.
@app.exception_handler(UnsupportedCurrencyError)
async def unsupported_currency_handler(request: Request, exc: UnsupportedCurrencyError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": settings.service_name}


from fraud_scoring.routers import settings as settings_router, stats, transactions  # noqa: E402

app.include_router(transactions.router, prefix="/api")
app.include_router(settings_router.router, prefix="/api")
app.include_router(stats.router, prefix="/api")
