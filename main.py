import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy.sql import text

from config.settings import get_settings
from src.db.database import SessionLocal, init_db
from src.logging_config import setup_logging
from src.routers import inner_dna as inner_dna_router

settings = get_settings()

# Configure logging VERY early
setup_logging(settings.log_level, json_logs=settings.json_logs)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Inner DNA Assessment Engine", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers ---
app.include_router(inner_dna_router.router, prefix="/api/v1/inner-dna", tags=["inner-dna"])


# --- Database Dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Error in get_db during yield: {e}", exc_info=True)
        # Reraise the exception so FastAPI handles it
        raise
    finally:
        db.close()


@app.get("/", tags=["Health Check"])
def read_root():
    """
    Root endpoint for basic health check.
    """
    return {"status": "ok", "message": "Inner DNA Assessment Engine is running."}


@app.get("/health/db", tags=["Health Check"])
def health_check_db(db: Session = Depends(get_db)):
    """
    Performs a database connection health check.
    """
    try:
        result = db.execute(text("SELECT 1")).scalar_one()
        logger.info(f"DB health check successful (SELECT 1 returned: {result})")
        return {"status": "ok", "db_check": result}
    except Exception as e:
        logger.error(f"DB health check failed: {e}", exc_info=True)
        # Raise 503 Service Unavailable if DB connection fails
        raise HTTPException(status_code=503, detail=f"Database connection error: {e}")


if __name__ == "__main__":
    import uvicorn
    # Better to run with `uvicorn main:app --reload` from the project root directory
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
