import logging

from pharmacy_registry import database
from pharmacy_registry.models_db import Base

logger = logging.getLogger("migration")


def run_migrations(engine=None):
    """
    Create the operational schema (pharmacies, audit, traces, tenancy).

    The reference registry belongs to another system and is never migrated here.
    """
    engine = engine or database.engine
    if engine is None:
        logger.error("❌ Engine do banco operacional não inicializada.")
        return

    logger.info("🔄 Verificando schema do banco operacional...")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Schema operacional pronto")
