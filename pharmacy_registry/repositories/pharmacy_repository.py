"""Repository for Pharmacy (establishment) entities."""
from typing import Optional, List

from pharmacy_registry.models_db import Pharmacy


class PharmacyRepository:
    def __init__(self, session):
        self._session = session

    def get_by_cnpj(self, cnpj: str) -> Optional[Pharmacy]:
        return self._session.get(Pharmacy, cnpj)

    def exists(self, cnpj: str) -> bool:
        return self._session.query(Pharmacy.cnpj).filter_by(cnpj=cnpj).first() is not None

    def get_by_parent(self, parent_cnpj: str) -> List[Pharmacy]:
        """Branches registered under a head-office CNPJ."""
        return self._session.query(Pharmacy).filter(
            Pharmacy.parent_cnpj == parent_cnpj,
        ).order_by(Pharmacy.cnpj).all()

    def count(self) -> int:
        return self._session.query(Pharmacy).count()

    def add(self, pharmacy: Pharmacy) -> Pharmacy:
        self._session.add(pharmacy)
        return pharmacy
