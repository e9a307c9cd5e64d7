"""
Database persistence for uploads and scrapes.

Tables:
- file_uploads: stored files, processing status and extraction results
- web_scrapes: scrape results

Extraction results are stored as JSON (camelCase, as returned by the API).
"""
import logging

from sqlalchemy import (
    create_engine, Column, String, DateTime, Text, Integer, JSON
)
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.sql import func

from findoc.core.config import settings

logger = logging.getLogger(__name__)

# ==================== SQLAlchemy Setup ====================
_connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args,
    echo=False
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# ==================== Database Models ====================

class FileUpload(Base):
    """
    An uploaded file. status: pending -> processing -> completed | error
    """
    __tablename__ = "file_uploads"

    id = Column(String, primary_key=True, index=True)  # file_{uuid}
    name = Column(String, nullable=False)  # original file name
    mime_type = Column(String, nullable=False)
    size = Column(Integer, default=0)
    file_path = Column(String, nullable=False)  # stored file path

    status = Column(String, default="pending", index=True)
    error = Column(Text, nullable=True)

    # Extraction output
    extracted_data = Column(JSON, nullable=True)
    processing_metadata = Column(JSON, nullable=True)

    # Timestamps
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
    processed_at = Column(DateTime(timezone=True), nullable=True)


class WebScrape(Base):
    """A scraped page and the records found on it."""
    __tablename__ = "web_scrapes"

    id = Column(String, primary_key=True, index=True)  # scrape_{uuid}
    url = Column(String, nullable=False, index=True)
    title = Column(String, nullable=True)

    status = Column(String, default="success")  # success, error
    error = Column(Text, nullable=True)

    tables = Column(JSON, nullable=True)
    text = Column(Text, nullable=True)
    financial_records = Column(JSON, nullable=True)
    scrape_metadata = Column(JSON, nullable=True)

    scraped_at = Column(DateTime(timezone=True), server_default=func.now())


# ==================== Database Initialization ====================

def create_db_and_tables():
    """Create all database tables."""
    try:
        logger.info("Initializing database and creating tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created: file_uploads, web_scrapes")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}", exc_info=True)
        raise


def reset_database():
    """
    Drop all tables and recreate them using SQLAlchemy metadata.
    """
    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables recreated")


# ==================== FastAPI Dependency ====================

def get_db():
    """FastAPI dependency to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
