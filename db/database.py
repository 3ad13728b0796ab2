import os
import logging
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

# Load environment-specific .env file
environment = os.getenv("ENVIRONMENT", "development")
env_file = f"environments/{environment}/.env"

if os.path.exists(env_file):
    load_dotenv(env_file, override=True)
else:
    load_dotenv()

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


class StoreNotConfigured(RuntimeError):
    """Raised when DATABASE_URL is missing from the environment"""


def build_database_url() -> str:
    """Assemble the store URL from DATABASE_URL and DATABASE_SERVICE_KEY"""
    raw_url = os.getenv("DATABASE_URL")
    if not raw_url:
        raise StoreNotConfigured("Missing DATABASE_URL")

    # Hosted Postgres providers still hand out the legacy scheme
    if raw_url.startswith("postgres://"):
        raw_url = raw_url.replace("postgres://", "postgresql://", 1)

    service_key = os.getenv("DATABASE_SERVICE_KEY")
    if service_key:
        return make_url(raw_url).set(password=service_key).render_as_string(hide_password=False)
    return raw_url


def get_engine() -> Engine:
    """Create the engine on first use"""
    global _engine, _session_factory
    if _engine is None:
        url = build_database_url()
        kwargs = {"pool_pre_ping": True, "echo": os.getenv("ENVIRONMENT") == "development"}
        if not url.startswith("sqlite"):
            kwargs.update(pool_size=10, max_overflow=20)
        _engine = create_engine(url, **kwargs)
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
        logger.info(f"Database engine created for {make_url(url).get_backend_name()}")
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _session_factory


# Dependency to get database session
def get_db():
    try:
        SessionLocal = get_session_factory()
    except StoreNotConfigured as e:
        logger.error(f"Backing store not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server not configured"
        )

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Test connection function
def test_connection() -> bool:
    try:
        from sqlalchemy import text
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            logger.info("Database connected successfully")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
