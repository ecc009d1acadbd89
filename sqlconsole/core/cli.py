"""Command-line options shared by the web server and the terminal shell."""

from __future__ import annotations

import argparse

from sqlconsole.core.config import Settings, load_settings, validate_rows_limit


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", default="configs/dev.yaml", help="Path to configuration file")
    parser.add_argument("--host", default=None, help="Interface to bind the server")
    parser.add_argument("--port", type=int, default=None, help="Port to serve")
    parser.add_argument("--rows-limit", type=int, default=None, help="Max number of rows to return")
    parser.add_argument(
        "--driver-name",
        default=None,
        help="SQLAlchemy drivername (e.g. postgresql+psycopg2); postgres and sqlite3 are also accepted",
    )
    parser.add_argument("--data-source-name", default=None, help="Database URL")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command-line overrides from *args* onto *settings*."""

    if args.host is not None:
        settings.server.host = args.host
    if args.port is not None:
        settings.server.port = args.port
    if args.rows_limit is not None:
        settings.query.rows_limit = validate_rows_limit(args.rows_limit)
    if args.driver_name is not None:
        settings.database.driver_name = args.driver_name
    if args.data_source_name is not None:
        settings.database.url = args.data_source_name
        settings.database.url_env = None
    return settings


def load_cli_settings(args: argparse.Namespace) -> Settings:
    return apply_overrides(load_settings(args.config), args)
