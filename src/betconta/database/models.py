"""SQLAlchemy models for betconta database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    Index,
    create_engine,
    true,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MasterUser(Base):
    """Master user model."""

    __tablename__ = "master_users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    cpf = Column(String(11), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    affiliate_status = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    child_accounts = relationship("ChildAccount", back_populates="master_user")


class ChildAccount(Base):
    """Child (sub-)account model."""

    __tablename__ = "child_accounts"

    id = Column(Integer, primary_key=True)
    master_user_id = Column(Integer, ForeignKey("master_users.id"), nullable=False)
    name = Column(String, unique=True, nullable=False)
    cpf = Column(String(11), unique=True, nullable=False)
    cpf_mask = Column(String, nullable=False)
    rg_number = Column(String, unique=True, nullable=False)
    email = Column(String, nullable=False)
    whatsapp = Column(String, nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    balance = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    master_user = relationship("MasterUser", back_populates="child_accounts")
    pix_keys = relationship("PixKey", back_populates="child_account")
    kyc_cases = relationship("KycCase", back_populates="child_account")


class PixKey(Base):
    """PIX key activation record; rows are closed, never deleted."""

    __tablename__ = "pix_keys"

    id = Column(Integer, primary_key=True)
    child_account_id = Column(Integer, ForeignKey("child_accounts.id"), nullable=False)
    key_type = Column(String(20), nullable=False)
    value = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # At most one active key per (child account, key type)
    __table_args__ = (
        Index(
            "uq_pix_keys_active_slot",
            "child_account_id",
            "key_type",
            unique=True,
            sqlite_where=is_active == true(),
            postgresql_where=is_active == true(),
        ),
        Index("ix_pix_keys_active_created", "is_active", "created_at"),
    )

    # Relationships
    child_account = relationship("ChildAccount", back_populates="pix_keys")


class KycCase(Base):
    """KYC submission model; one row per submission."""

    __tablename__ = "kyc_cases"

    id = Column(Integer, primary_key=True)
    master_user_id = Column(Integer, ForeignKey("master_users.id"), nullable=False)
    child_account_id = Column(Integer, ForeignKey("child_accounts.id"), nullable=True)
    account_type = Column(String(10), nullable=False)
    document_front = Column(String, nullable=False)
    document_back = Column(String, nullable=False)
    selfie = Column(String, nullable=False)
    document_type = Column(String(20), nullable=True)
    document_number = Column(String, nullable=True)
    holder_name = Column(String, nullable=True)
    status = Column(String(20), default="submitted", nullable=False)
    review_notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(String, nullable=True)

    # Relationships
    child_account = relationship("ChildAccount", back_populates="kyc_cases")


class Affiliate(Base):
    """Affiliate account model."""

    __tablename__ = "affiliates"

    id = Column(Integer, primary_key=True)
    master_user_id = Column(Integer, ForeignKey("master_users.id"), unique=True, nullable=False)
    code = Column(String(16), unique=True, nullable=False)
    commission_rate = Column(Numeric(12, 2), nullable=False)
    min_price = Column(Numeric(12, 2), nullable=False)
    max_price = Column(Numeric(12, 2), nullable=False)
    total_sales = Column(Integer, default=0, nullable=False)
    total_commission = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    approval_status = Column(String(20), default="pending", nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    settings = relationship(
        "AffiliateSettings", back_populates="affiliate", uselist=False, cascade="all, delete-orphan"
    )
    commission_records = relationship("CommissionRecord", back_populates="affiliate")


class AffiliateSettings(Base):
    """Affiliate referral-link settings model."""

    __tablename__ = "affiliate_settings"

    id = Column(Integer, primary_key=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id"), unique=True, nullable=False)
    default_price = Column(Numeric(12, 2), nullable=False)
    custom_message = Column(Text, nullable=True)
    landing_page_enabled = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    affiliate = relationship("Affiliate", back_populates="settings")


class CommissionRecord(Base):
    """Commission ledger entry model."""

    __tablename__ = "commission_records"

    id = Column(Integer, primary_key=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id"), nullable=False)
    child_account_id = Column(Integer, ForeignKey("child_accounts.id"), unique=True, nullable=False)
    sale_price = Column(Numeric(12, 2), nullable=False)
    base_cost = Column(Numeric(12, 2), nullable=False)
    commission = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(String(10), default="pending", nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    affiliate = relationship("Affiliate", back_populates="commission_records")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
