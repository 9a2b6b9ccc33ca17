"""Load sample employers, job seekers and jobs into an empty store."""

from pathlib import Path

import yaml

from marketplace.factory import Services
from utils.log import get_logger
from utils.schema import ROLE_EMPLOYER, ROLE_JOB_SEEKER

log = get_logger(__name__)

SEED_FILE = Path(__file__).resolve().parent / 'seed_data.yaml'


def load_seed_file(path=None) -> dict:
    """Read seed data YAML: top-level 'employers', 'job_seekers' and 'jobs' lists."""
    with open(path or SEED_FILE, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Seed file {path or SEED_FILE} must contain a mapping")
    return data


def seed_database(services: Services, data: dict, clear: bool = True) -> dict[str, int]:
    """
    Register the seed users and post the seed jobs through the services, so all the
    usual validation and password hashing applies.

    Args:
        services: Wired services (see marketplace.factory.create_services)
        data: Parsed seed data (see load_seed_file)
        clear: Delete every existing record first

    Returns:
        Counts of created employers, job seekers and jobs
    """
    if clear:
        services.store.clear()
        log.info("Cleared existing data")

    employers = {}
    for entry in data.get('employers') or []:
        fields = {k: v for k, v in entry.items() if k not in ('name', 'email', 'password')}
        user = services.identity.register(entry['name'], entry['email'], entry['password'], ROLE_EMPLOYER, **fields)
        employers[user.email] = user

    seekers = 0
    for entry in data.get('job_seekers') or []:
        fields = {k: v for k, v in entry.items() if k not in ('name', 'email', 'password')}
        services.identity.register(entry['name'], entry['email'], entry['password'], ROLE_JOB_SEEKER, **fields)
        seekers += 1

    jobs = 0
    for entry in data.get('jobs') or []:
        owner_email = str(entry.get('employer', '')).strip().lower()
        if owner_email not in employers:
            raise ValueError(f"Seed job {entry.get('title')!r} refers to unknown employer {owner_email!r}")
        fields = {k: v for k, v in entry.items() if k != 'employer'}
        services.catalog.create_job(employers[owner_email], fields)
        jobs += 1

    counts = {'employers': len(employers), 'job_seekers': seekers, 'jobs': jobs}
    log.info("Seeded %(employers)d employers, %(job_seekers)d job seekers, %(jobs)d jobs", counts)
    return counts
