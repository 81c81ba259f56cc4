import uuid
from datetime import datetime, timezone
from sqlalchemy import create_engine, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,
    max_overflow=20
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database tables.

    Imports all models so they register on Base.metadata, then creates
    any missing tables.
    """
    import app.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for column defaults"""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """String UUID primary key"""
    return str(uuid.uuid4())


def enum_values(enum_cls):
    """Persist enum values (e.g. 'on_hold') rather than member names"""
    return [member.value for member in enum_cls]
