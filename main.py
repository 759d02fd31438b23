import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database import Database
from core.config import settings
from core.logging_config import configure_logging
from services.finance_service import FinanceService
from services.fleet_client import FleetClient
from services.record_store import FinanceStores
from api.v1 import finance, income, expenses

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    db = Database.initialize()
    http_client = httpx.AsyncClient()
    app.state.finance_service = FinanceService(
        stores=FinanceStores.from_db(db),
        resolver=FleetClient(
            http_client,
            base_url=settings.FLEET_SERVICE_URL,
            timeout=settings.FLEET_LOOKUP_TIMEOUT_SECONDS,
        ),
        lookup_timeout=settings.FLEET_LOOKUP_TIMEOUT_SECONDS,
    )
    logger.info("Finance Service started (fleet service: %s)", settings.FLEET_SERVICE_URL)
    yield
    await http_client.aclose()
    Database.close()


app = FastAPI(title="Fleet Finance Service", lifespan=lifespan)

# Налаштування CORS
origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        "Incoming request %s %s query=%s",
        request.method,
        request.url.path,
        dict(request.query_params),
    )
    return await call_next(request)


# --- ПІДКЛЮЧЕННЯ РОУТЕРІВ ---
app.include_router(finance.router, prefix="/api/v1/finance", tags=["Finance"])
app.include_router(income.router, prefix="/api/v1/income", tags=["Income"])
app.include_router(expenses.router, prefix="/api/v1/expenses", tags=["Expenses"])


@app.get("/health")
def health_check():
    connected = Database.is_connected()
    payload = {
        "status": "UP",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.SERVICE_NAME,
        "database": "connected" if connected else "disconnected",
    }
    return JSONResponse(payload, status_code=200 if connected else 503)
