from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from inventory.config import get_settings
from inventory.database import engine, Base, SessionLocal
from inventory.exceptions import InventoryError
from inventory.api import products, categories, statistics, health
from inventory.seed import seed_database

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    if settings.SEED_DATA:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Inventory management API for products grouped into categories:

    - **Products**: Browse, search, filter, create, edit and delete products
    - **Stock adjustments**: Signed quantity changes, clamped at zero
    - **Categories**: Unique names, protected while products use them
    - **Statistics**: Totals, low-stock count and products per category

    ## Features

    ### Product identifiers
    Products get sequential codes (`P001`, `P002`, ...). A code taken by a
    concurrent request is detected and the allocation is retried.

    ### Stock adjustments
    Quantities are changed by a single conditional UPDATE, so concurrent
    adjustments never overwrite each other and stock never goes negative.

    ### Caching
    Statistics are cached in Redis and invalidated on every write.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    """Translate service exceptions into their HTTP status and message."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report the first invalid field as a 400 with a short message."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(describe_validation_error(exc)),
    )


def error_body(message: str) -> dict:
    """Error payload: the inventory UI reads ``error``, FastAPI clients read ``detail``."""
    return {"error": message, "detail": message}


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Datos inválidos"

    error = errors[0]
    if error.get("type") == "json_invalid":
        return "El cuerpo de la petición no es JSON válido"

    message = error.get("msg", "Datos inválidos").removeprefix("Value error, ")
    if error.get("type") == "value_error":
        return message

    # Drop the "body"/"query" location prefix
    field = ".".join(str(part) for part in error.get("loc", ())[1:])
    return f"{field}: {message}" if field else message


# Include API routers
app.include_router(health.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(statistics.router, prefix="/api")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/health"
    }
