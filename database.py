# database.py
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from settings import settings  # <-- single source of truth

logger = logging.getLogger("database")

DATABASE_URL = settings.DATABASE_URL

# sqlite needs cross-thread access for the test client and the websocket loop
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    future=True,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    logger.debug("Opened DB connection")
    try:
        yield db
    finally:
        db.close()
        logger.debug("Closed DB connection")
