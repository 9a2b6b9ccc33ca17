"""
Utils package: schema constants, parsing helpers, password hashing, logging.
Re-exports the public names so callers can use `from utils import ...`.
"""

from .schema import (
    APPLICATION_COLUMNS,
    APPLICATION_STATUSES,
    CATEGORIES,
    JOB_COLUMNS,
    JOB_STATUSES,
    JOB_TYPES,
    LOCATIONS,
    ROLES,
    USER_COLUMNS,
)

from .parsing import (
    clean_text,
    format_timestamp,
    new_id,
    normalize_email,
    normalize_skills,
    parse_timestamp,
    to_int,
    tokenize_search,
    utc_now,
)

from .security import hash_password, verify_password

from .log import configure_logging, get_logger

__all__ = [
    'APPLICATION_COLUMNS',
    'APPLICATION_STATUSES',
    'CATEGORIES',
    'JOB_COLUMNS',
    'JOB_STATUSES',
    'JOB_TYPES',
    'LOCATIONS',
    'ROLES',
    'USER_COLUMNS',
    'clean_text',
    'format_timestamp',
    'new_id',
    'normalize_email',
    'normalize_skills',
    'parse_timestamp',
    'to_int',
    'tokenize_search',
    'utc_now',
    'hash_password',
    'verify_password',
    'configure_logging',
    'get_logger',
]
