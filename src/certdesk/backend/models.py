"""SQLAlchemy models for the local record store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class Student(Base):
    """Student record model."""

    __tablename__ = "students"

    id = Column(String, primary_key=True, default=_new_id)
    candidate_name = Column(String, nullable=False)
    relation = Column(String, default="", nullable=False)
    parent_name = Column(String, default="", nullable=False)
    institute = Column(String, default="", nullable=False)
    course = Column(String, default="", nullable=False)
    division = Column(String, default="", nullable=False)
    marks_obtained = Column(String, default="", nullable=False)
    marks_total = Column(String, default="", nullable=False)
    date = Column(String, default="", nullable=False)
    place = Column(String, default="", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class Certificate(Base):
    """Certificate verification record model."""

    __tablename__ = "certificates"

    id = Column(String, primary_key=True, default=_new_id)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=True)
    candidate_name = Column(String, nullable=True)
    institute = Column(String, nullable=True)
    course = Column(String, nullable=True)
    signature_similarity_score = Column(Float, nullable=True)
    signature_match = Column(Boolean, nullable=True)
    is_legitimate = Column(Boolean, default=False, nullable=False)
    authenticity_check = Column(String, nullable=True)
    key_details = Column(JSON, default=dict, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees an empty database
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
