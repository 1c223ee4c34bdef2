"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for mall match records.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, Integer, DateTime, JSON
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class MallRecord(Base):
    """One record per mall holding its accepted brand matches."""

    __tablename__ = "malls"

    mall_key = Column(String, primary_key=True)  # name|city|state
    mall_name = Column(String, nullable=False)
    city = Column(String, nullable=False, default="")
    state = Column(String, nullable=False, default="")
    products = Column(JSON, nullable=False)  # [{brandName, productId, storeName}]
    threshold = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_summary(self) -> dict:
        return {
            "mallKey": self.mall_key,
            "mallName": self.mall_name,
            "city": self.city,
            "state": self.state,
            "productsCount": len(self.products or []),
        }

    def to_dict(self) -> dict:
        return {
            "mallKey": self.mall_key,
            "mallName": self.mall_name,
            "city": self.city,
            "state": self.state,
            "products": list(self.products or []),
            "threshold": self.threshold,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Session = sessionmaker(bind=engine)
    return Session()
