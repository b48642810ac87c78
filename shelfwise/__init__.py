"""
Shelfwise lending library.

Exports key modules for convenient imports.
"""

from .domain import (
    Book,
    Member,
    LoanStatus,
    Loan,
)

from .errors import (
    LibraryError,
    InvalidInput,
    NotFound,
    Unavailable,
    AlreadyReturned,
    InvariantViolation,
    HasActiveLoans,
)

from .storage import (
    Storage,
    MemoryStorage,
    JsonFileStorage,
)

from .repositories import (
    BookRepo,
    MemberRepo,
    LoanRepo,
    EntityStore,
)

from .services import (
    CatalogService,
    FineService,
    CirculationService,
    ReportingService,
    LibraryStats,
)

from .assistant import LibrarianAssistant
from .config import LibraryConfig, configure_logging
from .api import LibrarySystem, Outcome
from .seed import seed_demo_data

__all__ = [
    # domain
    "Book",
    "Member",
    "LoanStatus",
    "Loan",
    # errors
    "LibraryError",
    "InvalidInput",
    "NotFound",
    "Unavailable",
    "AlreadyReturned",
    "InvariantViolation",
    "HasActiveLoans",
    # storage
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    # repos
    "BookRepo",
    "MemberRepo",
    "LoanRepo",
    "EntityStore",
    # services
    "CatalogService",
    "FineService",
    "CirculationService",
    "ReportingService",
    "LibraryStats",
    # assistant
    "LibrarianAssistant",
    # config
    "LibraryConfig",
    "configure_logging",
    # api
    "LibrarySystem",
    "Outcome",
    # seed
    "seed_demo_data",
]
