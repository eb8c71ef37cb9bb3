from .unit_of_work import UnitOfWork
from .pharmacy_repository import PharmacyRepository
from .audit_repository import AuditRepository
from .trace_repository import TraceRepository
from .user_repository import UserRepository
from .membership_repository import MembershipRepository, OrganizationRepository, SessionRepository
