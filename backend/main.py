from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging

from config.logging import setup_logging
from config.env import settings
from database import init_db
from api.error_handler import register_exception_handlers
from routers import flashcards, generations, model_checks, statistics

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version
)

@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    try:
        logger.info("Initializing database...")
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize server: {str(e)}")
        # Re-raise to prevent server from starting without a usable database
        raise

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)

# Every error leaves the API as {"error": {"code", "message", "details"?}}
register_exception_handlers(app)

# Include routers
app.include_router(generations.router, prefix="/api/generations", tags=["generations"])
app.include_router(flashcards.router, prefix="/api/flashcards", tags=["flashcards"])
app.include_router(model_checks.router, prefix="/api/models", tags=["models"])
app.include_router(statistics.router, prefix="/api/statistics", tags=["statistics"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Flashcards API"}

if __name__ == "__main__":
    logger.info("Starting Flashcards API server")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
