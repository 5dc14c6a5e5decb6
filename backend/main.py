# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from services.errors import InventoryError, InvalidInput, StorageError

# Import routerów
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.stock import stockin_router, stockout_router
from routes.reports import router as reports_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Inicjalizacja
init_db()

app = FastAPI(title="Stock Tracker API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every service failure leaves as {"kind", "message"}; no storage details
@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", []) if part != "body")
        message = f"{field}: {first.get('msg', 'Invalid value')}" if field else first.get("msg", "Invalid value")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=InvalidInput(message).to_dict())


# Anything that escapes the services is reported as a storage failure, details stay in the log
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("%s %s failed with %s", request.method, request.url.path, type(exc).__name__, exc_info=exc)
    return JSONResponse(status_code=500, content=StorageError("Internal server error").to_dict())


# Rejestracja routerów
app.include_router(auth_router, prefix="/api")
app.include_router(products_router, prefix="/api/products")
app.include_router(stockin_router, prefix="/api/stockin")
app.include_router(stockout_router, prefix="/api/stockout")
app.include_router(reports_router, prefix="/api/reports")

@app.get("/")
def read_root():
    return {"message": "Stock Tracker API is running"}
