"""CLI entry point for the daily flood check."""

import argparse
import logging

from floodcheck.config.loader import get_config_value, load_config
from floodcheck.daemon import FloodCheckDaemon, daemon_status, stop_daemon
from floodcheck.reporting.formatters import format_history_row
from floodcheck.reporting.health_checker import HealthChecker
from floodcheck.storage import audit_repo
from floodcheck.storage.database import open_database

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/floodcheck.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="floodcheck",
        description="Daily flood risk check and push notifications",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    # daemon
    daemon_p = sub.add_parser("daemon", help="Run checks on the configured schedule")
    daemon_group = daemon_p.add_mutually_exclusive_group()
    daemon_group.add_argument("--stop", action="store_true", help="Stop the running daemon")
    daemon_group.add_argument("--status", action="store_true", help="Show daemon status")

    # history
    history_p = sub.add_parser("history", help="Show recent run records")
    history_p.add_argument("--limit", type=int, default=10)

    # health
    sub.add_parser("health", help="Run health checks")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. risk.threshold_pct")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "daemon":
        return _cmd_daemon(args)

    config = load_config(args.config)

    if args.command == "history":
        return _cmd_history(args)
    elif args.command == "health":
        return _cmd_health(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_daemon(args) -> int:
    if args.stop:
        return stop_daemon()
    if args.status:
        return daemon_status()
    config = load_config(args.config)
    FloodCheckDaemon(config, args.db).start()
    return 0


def _cmd_history(args) -> int:
    conn = open_database(args.db)
    rows = audit_repo.get_recent_run_records(conn, limit=args.limit)
    total = audit_repo.count_run_records(conn)
    conn.close()

    if not rows:
        print("No flood checks recorded yet")
        return 0
    print(f"Showing {len(rows)} of {total} runs")
    for row in rows:
        print(format_history_row(row))
    return 0


def _cmd_health(config, args) -> int:
    conn = open_database(args.db)
    status = HealthChecker(conn, config).check()
    conn.close()

    print(f"DB: {'OK' if status.db_connected else 'FAIL'}")
    print(f"Weather API: {'OK' if status.weather_api_reachable else 'FAIL'}")
    print(f"Prediction API: {'OK' if status.prediction_api_reachable else 'FAIL'}")
    print(f"Registered devices: {status.registered_devices}")
    if status.last_run_age_minutes is not None:
        print(f"Last run: {status.last_run_age_minutes:.0f} min ago")
    else:
        print("Last run: never")
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"weather": {"api_key"}}))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except KeyError as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get KEY")
        return 1
