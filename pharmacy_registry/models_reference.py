"""
Read-only mappings of the external civil/commercial registry.

These tables are owned by another system. The application only ever runs
point SELECTs against them, through a separate engine (database.reference_session).
"""
from datetime import date
from typing import Optional

from sqlalchemy import String, Integer, Date, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class ReferenceBase(DeclarativeBase):
    pass


class RefState(ReferenceBase):
    __tablename__ = "ref_states"

    ibge_code: Mapped[str] = mapped_column(String(2), primary_key=True)
    acronym: Mapped[str] = mapped_column(String(2), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(30))
    is_active: Mapped[Optional[str]] = mapped_column(String(1), default="S")


class RefCity(ReferenceBase):
    __tablename__ = "ref_cities"

    ibge_code: Mapped[str] = mapped_column(String(6), primary_key=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    state_acronym: Mapped[str] = mapped_column(String(2), nullable=False)
    area_code: Mapped[Optional[str]] = mapped_column(String(4))


class RefPerson(ReferenceBase):
    """Common master data, keyed by CPF (11) or CNPJ (14)."""
    __tablename__ = "ref_persons"

    document: Mapped[str] = mapped_column(String(14), primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    is_active: Mapped[str] = mapped_column(String(1), nullable=False, default="S")
    city_ibge_code: Mapped[Optional[str]] = mapped_column(String(6))
    state_acronym: Mapped[Optional[str]] = mapped_column(String(2))

    legal_entity: Mapped[Optional["RefLegalEntity"]] = relationship(uselist=False, viewonly=True)


class RefLegalEntity(ReferenceBase):
    """Legal-entity details (CNPJ situation at the federal revenue)."""
    __tablename__ = "ref_legal_entities"

    cnpj: Mapped[str] = mapped_column(ForeignKey("ref_persons.document"), primary_key=True)
    trade_name: Mapped[Optional[str]] = mapped_column(String(250))
    opening_date: Mapped[Optional[date]] = mapped_column(Date)
    cnpj_status_type: Mapped[Optional[int]] = mapped_column(Integer)
    cnpj_status_description: Mapped[Optional[str]] = mapped_column(String(500))
    responsible_cpf: Mapped[Optional[str]] = mapped_column(String(11))
