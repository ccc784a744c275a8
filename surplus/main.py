from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from surplus.config import get_settings
from surplus.db.db import create_db_and_tables
from surplus.errors import MarketplaceError
from surplus.logging_config import setup_logging
from surplus.routers import claims, listings, notifications

settings = get_settings()
logger = setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database ready")
    yield


app = FastAPI(lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Register routers
app.include_router(listings.router, prefix="/listings", tags=["Listings"])
app.include_router(claims.router, prefix="/claims", tags=["Claims"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])


@app.get("/")
def root():
    return {"status": "ok"}
