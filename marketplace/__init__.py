"""
Job board core: domain models, repositories, and the identity, catalog and
application ledger services. Storage-agnostic above the repository layer.
"""

from .errors import MarketplaceError
from .models import Application, Employer, Job, JobFilter, JobPage, JobSeeker, User
from .repository import ApplicationRepository, JobRepository, UserRepository
from .services import ApplicationLedgerService, IdentityService, JobCatalogService
from .factory import Services, create_services, create_services_from_settings, create_store

__all__ = [
    "MarketplaceError",
    "Application",
    "Employer",
    "Job",
    "JobFilter",
    "JobPage",
    "JobSeeker",
    "User",
    "ApplicationRepository",
    "JobRepository",
    "UserRepository",
    "ApplicationLedgerService",
    "IdentityService",
    "JobCatalogService",
    "Services",
    "create_services",
    "create_services_from_settings",
    "create_store",
]
