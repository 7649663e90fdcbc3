import enum

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserType(str, enum.Enum):
    CLIENT = "client"
    VENDOR = "vendor"


class JobCategory(str, enum.Enum):
    WEDDING = "Wedding"
    CORPORATE_EVENT = "Corporate Event"
    BIRTHDAY_PARTY = "Birthday Party"
    CONFERENCE = "Conference"
    CONCERT = "Concert"
    PRIVATE_PARTY = "Private Party"
    EXHIBITION = "Exhibition"
    OTHER = "Other"


class MilestoneStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    APPROVED = "approved"
    RELEASED = "released"


class EscrowStatus(str, enum.Enum):
    HELD = "held"
    RELEASED = "released"
    # Declared but never set by any workflow yet
    REFUNDED = "refunded"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # passlib hash, never serialized
    user_type = Column(String(20), nullable=False)  # client, vendor
    full_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    skills = Column(JSON, default=list, nullable=True)  # list of strings
    portfolio = Column(JSON, default=list, nullable=True)  # [{title, description}]
    created_at = Column(DateTime, server_default=func.now())

    jobs = relationship("Job", back_populates="client")
    proposals = relationship("Proposal", back_populates="vendor")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    budget = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(50), default="open", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    client = relationship("User", back_populates="jobs")
    proposals = relationship("Proposal", back_populates="job")
    milestones = relationship("Milestone", back_populates="job")


class Proposal(Base):
    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    status = Column(String(50), default="pending", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    job = relationship("Job", back_populates="proposals")
    vendor = relationship("User", back_populates="proposals")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(DateTime, nullable=True)
    status = Column(String(20), default=MilestoneStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    released_at = Column(DateTime, nullable=True)

    job = relationship("Job", back_populates="milestones")
    escrow_transactions = relationship(
        "EscrowTransaction", back_populates="milestone", order_by="EscrowTransaction.id"
    )


class EscrowTransaction(Base):
    __tablename__ = "escrow_transactions"

    id = Column(Integer, primary_key=True, index=True)
    milestone_id = Column(Integer, ForeignKey("milestones.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default=EscrowStatus.HELD.value, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    released_at = Column(DateTime, nullable=True)
    refunded_at = Column(DateTime, nullable=True)

    milestone = relationship("Milestone", back_populates="escrow_transactions")
