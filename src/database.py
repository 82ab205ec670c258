from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from src.config import settings

if settings.is_in_memory_sqlite:
    # A single shared connection keeps in-memory databases alive across sessions
    engine = create_engine(
        settings.DATABASE_URL,
        echo=settings.SQL_ECHO,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
elif settings.is_sqlite:
    engine = create_engine(
        settings.DATABASE_URL,
        echo=settings.SQL_ECHO,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """Yield a database session for the duration of a request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
