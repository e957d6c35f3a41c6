"""CLI entry point for the forecast sync service."""

import argparse
import logging

from weathersync.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from weathersync.daemon import SyncDaemon, daemon_status, stop_daemon
from weathersync.models.sync import SyncState
from weathersync.pipeline.sync_pipeline import DEFAULT_DB, SyncPipeline
from weathersync.reporting.formatters import format_record_line, format_result_json
from weathersync.storage import state_repo, weather_repo
from weathersync.storage.database import connect, run_migrations

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weathersync",
        description="Periodic weather forecast sync",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    # sync
    sync_p = sub.add_parser("sync", help="Run one sync")
    sync_p.add_argument("--json", action="store_true", help="Print the run result as JSON")

    # forecast
    sub.add_parser("forecast", help="Show stored forecast")

    # status
    sub.add_parser("status", help="Show last run and notification state")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")
    set_p.add_argument(
        "--write", action="store_true", help="Save the change to the config file"
    )

    # notifications on / off
    notif_p = sub.add_parser("notifications", help="Toggle notifications")
    notif_p.add_argument("state", choices=["on", "off"])

    # daemon
    daemon_p = sub.add_parser("daemon", help="Run syncs on an interval")
    daemon_p.add_argument("--interval", type=int, help="Seconds between syncs")
    daemon_p.add_argument("--stop", action="store_true", help="Stop running daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon status")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "sync":
        return _cmd_sync(args)
    elif args.command == "forecast":
        return _cmd_forecast(args)
    elif args.command == "status":
        return _cmd_status(args)
    elif args.command == "config":
        return _cmd_config(args)
    elif args.command == "notifications":
        return _cmd_notifications(args)
    elif args.command == "daemon":
        return _cmd_daemon(args)
    else:
        parser.print_help()
        return 1


def _cmd_sync(args) -> int:
    pipeline = SyncPipeline(config_path=args.config, db_path=args.db)
    result = pipeline.sync_weather()
    if args.json:
        print(format_result_json(result))
    else:
        print(f"Sync {result.state.value}: {result.records_stored} days stored")
    return 1 if result.state == SyncState.FAILED else 0


def _cmd_forecast(args) -> int:
    config = load_config(args.config)
    conn = connect(args.db)
    run_migrations(conn)
    records = weather_repo.get_all_records(conn)
    conn.close()

    if not records:
        print("No forecast stored")
        return 0
    for record in records:
        print(format_record_line(record, config.units))
    return 0


def _open_db(args):
    """Open the DB with the notification preference seeded from config."""
    conn = connect(args.db)
    run_migrations(conn)
    enabled = load_config(args.config).notifications.enabled
    state_repo.seed_preference(
        conn, state_repo.NOTIFICATIONS_ENABLED, "true" if enabled else "false"
    )
    return conn


def _cmd_status(args) -> int:
    conn = _open_db(args)
    enabled = state_repo.are_notifications_enabled(conn)
    last_notified = state_repo.get_last_notified_at(conn)
    stored = weather_repo.count_records(conn)
    last_run = state_repo.get_latest_run(conn)
    conn.close()

    print(f"Stored days: {stored}")
    print(
        f"Notifications: {'on' if enabled else 'off'} | "
        f"Last notified: {last_notified.isoformat() if last_notified else 'never'}"
    )
    if last_run is None:
        print("Last run: never")
    else:
        detail = f" ({last_run['error_kind']})" if last_run["error_kind"] else ""
        print(f"Last run: {last_run['status']}{detail} at {last_run['started_at']}")
    return 0


def _cmd_config(args) -> int:
    config = load_config(args.config)
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        if args.write:
            save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_notifications(args) -> int:
    conn = _open_db(args)
    state_repo.set_notifications_enabled(conn, args.state == "on")
    print(f"Notifications: {args.state}")
    conn.close()
    return 0


def _cmd_daemon(args) -> int:
    if args.stop:
        return stop_daemon()
    if args.status:
        return daemon_status()
    interval = args.interval
    if interval is None:
        interval = load_config(args.config).ops.sync_interval_minutes * 60
    return SyncDaemon(args.config, db_path=args.db, interval=interval).start()
