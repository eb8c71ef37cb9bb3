from datetime import datetime, timezone
from typing import Optional, List
import uuid

from sqlalchemy import String, ForeignKey, Index, Text, JSON, TIMESTAMP, Uuid, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from flask_login import UserMixin

from pharmacy_registry.domain.entities.establishment import EstablishmentStatus, INITIAL_STATUS


def _utcnow():
    return datetime.now(timezone.utc)


# 1. Declaração Base (banco operacional)
class Base(DeclarativeBase):
    pass


# 2. Tenancy
class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[Optional[str]] = mapped_column(String(60), unique=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)

    members: Mapped[List["Member"]] = relationship(back_populates="organization", cascade="all, delete-orphan")


class User(UserMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(150))
    cpf: Mapped[Optional[str]] = mapped_column(String(11))
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)

    memberships: Mapped[List["Member"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    # Set by the session loader for the current request; not persisted.
    active_organization_id = None


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_members_org_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("organizations.id"), index=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="member")
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)

    organization: Mapped["Organization"] = relationship(back_populates="members")
    user: Mapped["User"] = relationship(back_populates="memberships")


class UserSession(Base):
    __tablename__ = "user_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    token: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(255))
    active_organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    user: Mapped["User"] = relationship()


# 3. Estabelecimento (farmácia)
class Pharmacy(Base):
    __tablename__ = "pharmacies"

    cnpj: Mapped[str] = mapped_column(String(14), primary_key=True)
    parent_cnpj: Mapped[Optional[str]] = mapped_column(String(14))
    license_number: Mapped[Optional[str]] = mapped_column(String(20))
    company_name: Mapped[str] = mapped_column(String(100), nullable=False)
    trade_name: Mapped[Optional[str]] = mapped_column(String(120))
    operational_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=INITIAL_STATUS.value
    )

    # Endereço
    street_type: Mapped[Optional[str]] = mapped_column(String(30))
    address: Mapped[Optional[str]] = mapped_column(String(100))
    street_number: Mapped[Optional[str]] = mapped_column(String(7))
    address_complement: Mapped[Optional[str]] = mapped_column(String(160))
    district: Mapped[Optional[str]] = mapped_column(String(120))
    city_ibge_code: Mapped[Optional[str]] = mapped_column(String(6))
    zip_code: Mapped[Optional[str]] = mapped_column(String(8))

    # Contato
    area_code: Mapped[Optional[str]] = mapped_column(String(4))
    phone_number: Mapped[Optional[str]] = mapped_column(String(10))
    email: Mapped[Optional[str]] = mapped_column(String(60))
    contact_name: Mapped[Optional[str]] = mapped_column(String(70))

    # Responsáveis
    legal_responsible_name: Mapped[Optional[str]] = mapped_column(String(70))
    legal_responsible_cpf: Mapped[Optional[str]] = mapped_column(String(11))
    technical_responsible_name: Mapped[Optional[str]] = mapped_column(String(70))
    technical_responsible_cpf: Mapped[Optional[str]] = mapped_column(String(11))
    crf_number: Mapped[Optional[str]] = mapped_column(String(7))
    crf_state: Mapped[Optional[str]] = mapped_column(String(2))

    # Proveniência
    created_by: Mapped[Optional[str]] = mapped_column(String(255))
    updated_by: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_pharmacies_city_status", "city_ibge_code", "operational_status"),
    )

    # Business fields, in the order they appear in snapshots and patches.
    EDITABLE_FIELDS = (
        "parent_cnpj", "license_number", "company_name", "trade_name",
        "street_type", "address", "street_number", "address_complement",
        "district", "city_ibge_code", "zip_code",
        "area_code", "phone_number", "email", "contact_name",
        "legal_responsible_name", "legal_responsible_cpf",
        "technical_responsible_name", "technical_responsible_cpf",
        "crf_number", "crf_state",
    )

    def to_snapshot(self) -> dict:
        """Full field-by-field state, JSON-compatible."""
        snapshot = {"cnpj": self.cnpj}
        for name in self.EDITABLE_FIELDS:
            snapshot[name] = getattr(self, name)
        status = self.operational_status
        snapshot["operational_status"] = status.value if isinstance(status, EstablishmentStatus) else status
        snapshot["created_by"] = self.created_by
        snapshot["updated_by"] = self.updated_by
        snapshot["created_at"] = isoformat_utc(self.created_at)
        snapshot["updated_at"] = isoformat_utc(self.updated_at)
        return snapshot


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite hands back naive values; everything is stored in UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


# 4. Auditoria (append-only)
class AuditRecord(Base):
    __tablename__ = "audit_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    table_name: Mapped[str] = mapped_column(String(128), nullable=False)
    target_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    actor_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    origin: Mapped[Optional[str]] = mapped_column(String(255))
    before: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    after: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)


# 5. Rastro de requisições (best-effort)
class TraceRecord(Base):
    __tablename__ = "user_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    route: Mapped[str] = mapped_column(String(1024), nullable=False)
    method: Mapped[Optional[str]] = mapped_column(String(30))
    actor_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    origin: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
