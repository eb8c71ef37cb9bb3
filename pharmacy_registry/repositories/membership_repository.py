"""Repository for tenancy rows: organization memberships and login sessions."""
from datetime import datetime, timezone
from typing import Optional, List
import uuid

from pharmacy_registry.models_db import Member, Organization, UserSession


class MembershipRepository:
    def __init__(self, session):
        self._session = session

    def get_role(self, user_id: uuid.UUID, organization_id: uuid.UUID) -> Optional[str]:
        """Role of the user inside the organization, or None when not a member."""
        member = self._session.query(Member).filter(
            Member.user_id == user_id,
            Member.organization_id == organization_id,
        ).first()
        return member.role if member else None

    def get_for_user(self, user_id: uuid.UUID) -> List[Member]:
        return self._session.query(Member).filter(Member.user_id == user_id).all()

    def add(self, member: Member) -> Member:
        self._session.add(member)
        return member


class SessionRepository:
    def __init__(self, session):
        self._session = session

    def get_active_by_token(self, token: str, now: datetime = None) -> Optional[UserSession]:
        """Session row for the token, unless it has expired."""
        if not token:
            return None
        user_session = self._session.query(UserSession).filter_by(token=token).first()
        if not user_session:
            return None

        now = now or datetime.now(timezone.utc)
        expires_at = user_session.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= now:
            return None
        return user_session

    def add(self, user_session: UserSession) -> UserSession:
        self._session.add(user_session)
        return user_session


class OrganizationRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[Organization]:
        return self._session.get(Organization, id)

    def get_by_slug(self, slug: str) -> Optional[Organization]:
        return self._session.query(Organization).filter_by(slug=slug).first()

    def add(self, organization: Organization) -> Organization:
        self._session.add(organization)
        return organization
