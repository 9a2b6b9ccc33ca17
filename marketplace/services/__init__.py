from .identity import IdentityService
from .catalog import JobCatalogService
from .ledger import ApplicationLedgerService

__all__ = ["IdentityService", "JobCatalogService", "ApplicationLedgerService"]
