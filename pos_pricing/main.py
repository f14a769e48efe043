# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from . import db
from .logging_config import setup_logging
from .routes import admin_catalog_router, pricing_router

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schemas come from `alembic upgrade head`; this only fills gaps
    db.init_db()
    logger.info("POS pricing service started")
    yield
    logger.info("POS pricing service stopped")


app = FastAPI(
    title="POS Pricing API",
    description="Price calculation for configured menu items",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Pricing", "description": "Price calculation for order entry"},
        {"name": "Admin - Catalog", "description": "Admin endpoints for the catalog cache"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pricing_router)
app.include_router(admin_catalog_router)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy"}
