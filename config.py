import os

import yaml
from dotenv import load_dotenv

from utils.log import get_logger

log = get_logger(__name__)

load_dotenv()

# Configuration file name
CONFIG_FILE = 'job_board.yaml'

DEFAULT_SETTINGS = {
    'database_path': os.path.join('local_data', 'job_board.db'),
    'token_ttl_hours': 720,  # 30 days
    'page_size': 10,
    'min_password_length': 6,
    'password_hash_iterations': None,  # None keeps the built-in default
    'log_level': 'INFO',
}

# Environment variable -> (setting, converter)
ENV_OVERRIDES = {
    'DATABASE_PATH': ('database_path', str),
    'TOKEN_TTL_HOURS': ('token_ttl_hours', float),
    'PAGE_SIZE': ('page_size', int),
    'LOG_LEVEL': ('log_level', str),
}


def _load_config_file(path):
    """Read settings from YAML. Missing, unreadable or malformed files yield {}."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, 'r') as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.warning("Error parsing %s (invalid YAML): %s. Using defaults.", path, e)
        return {}
    except OSError as e:
        log.warning("Error reading %s: %s. Using defaults.", path, e)
        return {}
    if content is None:
        return {}
    if not isinstance(content, dict):
        log.warning("Ignoring %s: expected a mapping at the top level", path)
        return {}
    return content


def get_settings(config_path=None):
    """
    Returns the job board settings: defaults, then the YAML file, then environment.

    The JWT secret is read from the JWT_SECRET environment variable only (never from
    the YAML file) and is None when unset.
    """
    settings = dict(DEFAULT_SETTINGS)

    file_settings = _load_config_file(config_path or CONFIG_FILE)
    for key, value in file_settings.items():
        if key not in DEFAULT_SETTINGS:
            log.warning("Unknown setting %r in %s ignored", key, config_path or CONFIG_FILE)
            continue
        settings[key] = value

    for env_name, (key, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == '':
            continue
        try:
            settings[key] = convert(raw.strip())
        except ValueError:
            log.warning("Ignoring %s=%r: not a valid %s", env_name, raw, convert.__name__)

    settings['jwt_secret'] = os.getenv('JWT_SECRET') or None
    return settings


def save_settings(settings, config_path=None):
    """Saves settings to YAML. The JWT secret is never written."""
    data = {k: v for k, v in settings.items() if k in DEFAULT_SETTINGS}
    with open(config_path or CONFIG_FILE, 'w') as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
