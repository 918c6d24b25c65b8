from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from database import database
from genia import __version__, __product__, config
from genia.routes import auth, generation, licensing, account
from genia.services.account_service import account_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {__product__} API")
    await database.connect()

    if not config.LLM_API_KEY:
        logger.error("LLM_API_KEY is not set. Generation will fail at the outline stage.")

    # Rehydrate the device session, if one was stored
    session = await account_service.restore()
    if session:
        logger.info(f"Session restored for {session.uid} (plan={session.plan.value}, quota={session.quota})")
    else:
        logger.info("No stored session; waiting for login")

    yield

    # Shutdown
    logger.info(f"Shutting down {__product__} API")
    await database.close()

# Create FastAPI app
app = FastAPI(
    title=f"{__product__} API",
    description="AI e-book and slide deck generation with activation-code credits",
    version=__version__,
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Genia-Quota", "X-Genia-Images-Missing"],
)

# Include routers
app.include_router(auth.router)
app.include_router(generation.router)
app.include_router(licensing.router)
app.include_router(account.router)

# Root endpoint
@app.get("/api")
async def root():
    return {
        "service": __product__,
        "version": __version__,
        "status": "operational"
    }

# Health check
@app.get("/api/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": os.getenv("ENVIRONMENT", "development")
    }
