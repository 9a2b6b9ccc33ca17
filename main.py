#!/usr/bin/env python3
"""
Job board command line.

Usage:
    python main.py init                                   # Create the database and job_board.yaml
    python main.py seed                                   # Reset the database to the sample data
    python main.py seed --file my_data.yaml               # Seed from another file
    python main.py methods                                # List request methods
    python main.py call login --data '{"email": "rajesh@example.com", "password": "password123"}'
    python main.py call applications.apply --data '{"jobId": "..."}' --token <token>

The token may also be given in the JOB_BOARD_TOKEN environment variable.
"""

import argparse
import json
import os
import sys

import config
from marketplace.api import available_methods, handle_request
from marketplace.errors import MarketplaceError
from marketplace.factory import create_services_from_settings, create_store
from seed import load_seed_file, seed_database
from utils.log import configure_logging, get_logger

log = get_logger(__name__)


# ============================================================================
# Commands
# ============================================================================

def cmd_init(settings, config_path):
    """Create the database file and write a default config if none exists."""
    path = config_path or config.CONFIG_FILE
    if not os.path.exists(path):
        config.save_settings(settings, path)
        print(f"Wrote default settings to {path}")
    create_store(settings['database_path'])
    print(f"Database ready at {settings['database_path']}")
    if not settings.get('jwt_secret'):
        print("WARNING: JWT_SECRET is not set. Add it to your environment or .env file.")
    return 0


def cmd_seed(settings, seed_file):
    services = create_services_from_settings(settings)
    counts = seed_database(services, load_seed_file(seed_file))
    print(
        f"Seeded {counts['employers']} employers, {counts['job_seekers']} job seekers "
        f"and {counts['jobs']} jobs into {settings['database_path']}"
    )
    return 0


def cmd_call(settings, method_name, data, token):
    try:
        payload = json.loads(data) if data else {}
    except json.JSONDecodeError as e:
        print(f"--data is not valid JSON: {e}", file=sys.stderr)
        return 2
    if not isinstance(payload, dict):
        print("--data must be a JSON object", file=sys.stderr)
        return 2

    services = create_services_from_settings(settings)
    response = handle_request(services, method_name, payload, token=token or os.getenv('JOB_BOARD_TOKEN'))
    print(json.dumps(response, indent=2))
    return 0 if response['ok'] else 1


def cmd_methods():
    for name in available_methods():
        print(name)
    return 0


# ============================================================================
# CLI
# ============================================================================

def build_parser():
    parser = argparse.ArgumentParser(description="Job board: accounts, job postings and applications.")
    parser.add_argument(
        '--config',
        default=None,
        help=f"Settings file (default: {config.CONFIG_FILE})"
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('init', help="Create the database and a default settings file")

    seed_parser = subparsers.add_parser('seed', help="Replace all data with the sample data")
    seed_parser.add_argument(
        '--file',
        default=None,
        help="Seed data YAML (default: seed_data.yaml)"
    )

    call_parser = subparsers.add_parser('call', help="Run one request method and print the JSON response")
    call_parser.add_argument('method', help="Method name, see `methods`")
    call_parser.add_argument(
        '--data',
        default=None,
        help="Request payload as a JSON object"
    )
    call_parser.add_argument(
        '--token',
        default=None,
        help="Credential from register/login (default: $JOB_BOARD_TOKEN)"
    )

    subparsers.add_parser('methods', help="List request methods")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = config.get_settings(args.config)
    configure_logging(settings['log_level'])

    try:
        if args.command == 'init':
            return cmd_init(settings, args.config)
        if args.command == 'seed':
            return cmd_seed(settings, args.file)
        if args.command == 'call':
            return cmd_call(settings, args.method, args.data, args.token)
        return cmd_methods()
    except (ValueError, MarketplaceError) as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
