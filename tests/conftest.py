"""
Shared fixtures: in-memory SQLite engines for the operational store and the
reference registry, model factories and a Flask test client.
"""
import secrets
import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from pharmacy_registry.database import build_engine
from pharmacy_registry.domain.entities.actor import ActorContext
from pharmacy_registry.domain.entities.establishment import EstablishmentStatus
from pharmacy_registry.models_db import Base, Member, Organization, Pharmacy, User, UserSession
from pharmacy_registry.models_reference import (
    RefCity,
    RefLegalEntity,
    RefPerson,
    RefState,
    ReferenceBase,
)
from pharmacy_registry.repositories.unit_of_work import UnitOfWork
from pharmacy_registry.services.registry_client import RegistryClient

# Documents with valid check digits
COMPANY_CNPJ = "11222333000181"
OTHER_CNPJ = "11444777000161"
LEGAL_CPF = "52998224725"
TECHNICAL_CPF = "11144477735"
CITY_CODE = "355030"


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class OrganizationFactory:
    @staticmethod
    def create(session, **kwargs):
        suffix = uuid.uuid4().hex[:8]
        defaults = {
            'id': uuid.uuid4(),
            'name': f'Rede Teste {suffix}',
            'slug': f'rede-{suffix}',
        }
        defaults.update(kwargs)
        organization = Organization(**defaults)
        session.add(organization)
        session.commit()
        return organization


class UserFactory:
    @staticmethod
    def create(session, **kwargs):
        defaults = {
            'id': uuid.uuid4(),
            'email': f'user-{uuid.uuid4().hex[:8]}@test.com',
            'name': 'Usuário Teste',
        }
        defaults.update(kwargs)
        user = User(**defaults)
        session.add(user)
        session.commit()
        return user


class MembershipFactory:
    @staticmethod
    def create(session, user=None, organization=None, role='owner'):
        user = user or UserFactory.create(session)
        organization = organization or OrganizationFactory.create(session)
        member = Member(id=uuid.uuid4(), user_id=user.id, organization_id=organization.id, role=role)
        session.add(member)
        session.commit()
        return member


class PharmacyFactory:
    @staticmethod
    def create(session, **kwargs):
        now = datetime.now(timezone.utc)
        defaults = {
            'cnpj': COMPANY_CNPJ,
            'company_name': 'Drogaria Teste LTDA',
            'trade_name': 'Drogaria Teste',
            'city_ibge_code': CITY_CODE,
            'operational_status': EstablishmentStatus.ACTIVE.value,
            'created_by': 'seed',
            'updated_by': 'seed',
            'created_at': now,
            'updated_at': now,
        }
        defaults.update(kwargs)
        pharmacy = Pharmacy(**defaults)
        session.add(pharmacy)
        session.commit()
        return pharmacy


class RegistryFactory:
    """Seeds the reference registry tables."""

    @staticmethod
    def create_person(session, document=LEGAL_CPF, name='Maria da Silva', is_active='S'):
        person = RefPerson(document=document, name=name, is_active=is_active,
                           city_ibge_code=CITY_CODE, state_acronym='SP')
        session.add(person)
        session.commit()
        return person

    @staticmethod
    def create_legal_entity(session, cnpj=COMPANY_CNPJ, name='Drogaria Teste LTDA',
                            status_type=2, is_active='S', with_details=True):
        person = RefPerson(document=cnpj, name=name, is_active=is_active,
                           city_ibge_code=CITY_CODE, state_acronym='SP')
        session.add(person)
        if with_details:
            session.add(RefLegalEntity(
                cnpj=cnpj,
                trade_name='Drogaria Teste',
                opening_date=date(2010, 5, 17),
                cnpj_status_type=status_type,
                cnpj_status_description='ATIVA' if status_type == 2 else 'BAIXADA',
            ))
        session.commit()
        return person

    @staticmethod
    def create_city(session, code=CITY_CODE, name='São Paulo', state='SP'):
        city = RefCity(ibge_code=code, name=name, state_acronym=state, area_code='11')
        session.add(city)
        session.commit()
        return city

    @staticmethod
    def create_state(session, code='35', acronym='SP', name='São Paulo', is_active='S'):
        state = RefState(ibge_code=code, acronym=acronym, name=name, is_active=is_active)
        session.add(state)
        session.commit()
        return state

    @classmethod
    def seed_defaults(cls, session):
        """Company, both responsible persons, city and state used across the tests."""
        cls.create_legal_entity(session)
        cls.create_person(session, LEGAL_CPF, 'Maria da Silva')
        cls.create_person(session, TECHNICAL_CPF, 'João Farmacêutico')
        cls.create_city(session)
        cls.create_state(session)


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(bind=db_engine)()
    yield session
    session.close()


@pytest.fixture
def uow(db_session):
    return UnitOfWork(db_session)


@pytest.fixture
def reference_engine():
    engine = build_engine("sqlite://")
    ReferenceBase.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def reference_factory(reference_engine):
    return sessionmaker(bind=reference_engine)


@pytest.fixture
def reference_session(reference_factory):
    session = reference_factory()
    yield session
    session.close()


@pytest.fixture
def registry_client(reference_factory):
    return RegistryClient(reference_factory)


@pytest.fixture
def seeded_registry(reference_session, registry_client):
    RegistryFactory.seed_defaults(reference_session)
    return registry_client


@pytest.fixture
def organization_factory():
    return OrganizationFactory


@pytest.fixture
def user_factory():
    return UserFactory


@pytest.fixture
def membership_factory():
    return MembershipFactory


@pytest.fixture
def pharmacy_factory():
    return PharmacyFactory


@pytest.fixture
def registry_factory():
    return RegistryFactory


@pytest.fixture
def actor_for(db_session):
    """Build an ActorContext whose active organization grants `role`."""
    def _make(role='owner', origin='10.0.0.1'):
        member = MembershipFactory.create(db_session, role=role)
        return ActorContext(
            actor_id=member.user_id,
            active_organization_id=member.organization_id,
            origin=origin,
        )
    return _make


# ---------------------------------------------------------------------------
# Flask app fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def app():
    from pharmacy_registry import database
    from pharmacy_registry.app import create_app

    app = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite://',
        'REFERENCE_DATABASE_URL': 'sqlite://',
        'RATELIMIT_ENABLED': False,
        'TRACE_SYNCHRONOUS': True,
    })
    ReferenceBase.metadata.create_all(database.reference_engine)
    yield app
    app.trace_recorder.shutdown()
    database.db_session.remove()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def app_session(app):
    """Plain session on the app's operational engine, for seeding and asserting."""
    from pharmacy_registry import database
    session = Session(bind=database.engine, expire_on_commit=False)
    yield session
    session.close()


@pytest.fixture
def app_registry(app):
    """Seed the app's reference registry with the default records."""
    from pharmacy_registry import database
    session = Session(bind=database.reference_engine, expire_on_commit=False)
    RegistryFactory.seed_defaults(session)
    yield session
    session.close()


@pytest.fixture
def auth_headers(app_session):
    """Authorization header for a fresh user whose session has `role` in its active organization."""
    def _make(role='owner', active_organization=True, expired=False):
        member = MembershipFactory.create(app_session, role=role)
        token = secrets.token_urlsafe(24)
        offset = timedelta(hours=-1) if expired else timedelta(hours=8)
        app_session.add(UserSession(
            id=uuid.uuid4(),
            user_id=member.user_id,
            token=token,
            expires_at=datetime.now(timezone.utc) + offset,
            active_organization_id=member.organization_id if active_organization else None,
        ))
        app_session.commit()
        return {'Authorization': f'Bearer {token}'}
    return _make
