import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

from .config import config
from .domain.exceptions import TransportFailureError

logger = logging.getLogger("pharmacy-registry")

# Variáveis Globais
engine = None
db_session = None
reference_engine = None
reference_session = None

OPERATIONAL_STORE = "operacional"
REFERENCE_STORE = "referencia"

TRANSPORT_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


def normalize_database_url(database_url: Optional[str]) -> Optional[str]:
    """
    Normaliza a URL do banco.
    - Se for Postgres, garante que sslmode=require esteja presente.
    """
    if not database_url:
        return None

    try:
        url = make_url(database_url)
    except Exception:
        # Mantém a URL como está se não for parseável pelo SQLAlchemy
        return database_url

    if url.drivername.startswith("postgresql") and "sslmode" not in url.query:
        url = url.set(query={**url.query, "sslmode": "require"})

    return url.render_as_string(hide_password=False)


def build_engine(database_url: str):
    """
    Create an engine with bounded waits: pool checkout, connect and (on
    Postgres) statement execution all time out.
    """
    url = make_url(database_url)

    if url.drivername.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": config.DB_CONNECT_TIMEOUT}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    connect_args = {}
    if url.drivername.startswith("postgresql"):
        connect_args = {
            "connect_timeout": config.DB_CONNECT_TIMEOUT,
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}",
        }

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_timeout=config.DB_POOL_TIMEOUT,
        connect_args=connect_args,
    )


def _mask(database_url: str) -> str:
    return database_url.split("@")[-1] if "@" in database_url else "configured"


def init_db(database_url: Optional[str] = None, reference_url: Optional[str] = None):
    """Initialise both engines and their scoped session registries."""
    global engine, db_session, reference_engine, reference_session

    database_url = normalize_database_url(database_url or config.DATABASE_URL)
    reference_url = normalize_database_url(reference_url or config.REFERENCE_DATABASE_URL)

    if not database_url:
        logger.warning("⚠️ DATABASE_URL não encontrada na Config. Verifique as variáveis de ambiente.")
        return

    try:
        logger.info(f"🔌 Conectando ao banco operacional: {_mask(database_url)}")
        engine = build_engine(database_url)
        db_session = scoped_session(sessionmaker(autocommit=False, autoflush=False, bind=engine))

        if reference_url:
            logger.info(f"🔌 Conectando ao cadastro de referência: {_mask(reference_url)}")
            reference_engine = build_engine(reference_url)
        else:
            logger.warning("⚠️ REFERENCE_DATABASE_URL ausente, usando o banco operacional para o cadastro de referência.")
            reference_engine = engine
        reference_session = sessionmaker(autocommit=False, autoflush=False, bind=reference_engine)
        logger.info("✅ Conexões com Banco de Dados Inicializadas")
    except Exception as e:
        logger.error(f"❌ Erro ao criar engine do banco: {e}")
        raise


def get_db():
    """Yield the request-scoped operational session."""
    if db_session is None:
        init_db()

    if db_session is None:
        yield None
        return

    # scoped_session returns the same session for the thread;
    # removal happens in the app teardown.
    yield db_session()


@contextmanager
def store_errors(store: str):
    """Translate driver/pool failures into a retryable TransportFailureError."""
    try:
        yield
    except TRANSPORT_ERRORS as e:
        logger.error(f"❌ Falha de transporte no banco {store}: {e.__class__.__name__}")
        raise TransportFailureError(store, e.__class__.__name__) from e
