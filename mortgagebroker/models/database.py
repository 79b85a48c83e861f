"""Database models for lead and intake persistence"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

from mortgagebroker.models.tools import LoanPurpose, Occupancy, PropertyType

Base = declarative_base()


class Lead(Base):
    """A contact captured by the lead form"""

    __tablename__ = "leads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    consent = Column(Boolean, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    intakes = relationship("Intake", back_populates="lead")

    def to_record(self):
        """Convert to LeadRecord pydantic model"""
        from mortgagebroker.models.tools import LeadRecord

        return LeadRecord(
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            consent=self.consent,
            created_at=self.created_at,
        )


class Intake(Base):
    """Loan preferences collected before the application handoff"""

    __tablename__ = "intakes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    lead_id = Column(String, ForeignKey("leads.id"), nullable=True)
    purpose = Column(Enum(LoanPurpose), nullable=False)
    occupancy = Column(Enum(Occupancy), nullable=False)
    property_type = Column(Enum(PropertyType), nullable=False)
    est_price = Column(Integer, nullable=True)
    est_down_payment = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    lead = relationship("Lead", back_populates="intakes")


# Database setup
def create_database_engine(database_url: str = "sqlite:///./mortgagebroker.db"):
    """Create database engine"""
    engine_kwargs = {}
    if "sqlite" in database_url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            # Share the single in-memory database across sessions
            engine_kwargs["poolclass"] = StaticPool

    return create_engine(database_url, echo=False, **engine_kwargs)


def create_tables(engine):
    """Create all tables"""
    Base.metadata.create_all(bind=engine)


def get_session_maker(engine):
    """Get session maker"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
