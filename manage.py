#!/usr/bin/env python3
"""
Stockroom management CLI.

Usage:
    python manage.py start           Start the API server in the background
    python manage.py stop            Graceful shutdown
    python manage.py restart         Stop + start
    python manage.py status          Check if the server is running
    python manage.py migrate         Apply pending database migrations
    python manage.py migrate-status  Show applied and pending migrations
"""

import argparse
import asyncio
import os
import platform
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".stockroom.pid"
APP_PATH = "stockroom.api.main:app"

IS_WINDOWS = platform.system() == "Windows"


def _read_pid() -> int | None:
    """Read PID from the pid file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None

    if _is_pid_alive(pid):
        return pid

    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
                capture_output=True,
                text=True,
            )
            return str(pid) in result.stdout
        except OSError:
            return False
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _kill_pid(pid: int) -> bool:
    """Send termination signal to a process. Returns True if successful."""
    try:
        if IS_WINDOWS:
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"], capture_output=True)
        else:
            os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _wait_for_exit(pid: int, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)
    return not _is_pid_alive(pid)


def _is_port_free(port: int) -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def cmd_start(args: argparse.Namespace) -> None:
    """Start uvicorn in the background and record its PID."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: Port {args.port} is already in use.")
        sys.exit(1)

    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        APP_PATH,
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.workers and args.workers > 1:
        uvicorn_cmd += ["--workers", str(args.workers)]

    print(f"Starting server on {args.host}:{args.port}...")
    if IS_WINDOWS:
        proc = subprocess.Popen(
            uvicorn_cmd,
            cwd=str(ROOT_DIR),
            creationflags=subprocess.CREATE_NEW_PROCESS_GROUP,
        )
    else:
        proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api/inventory/items")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid) and not _wait_for_exit(pid):
        print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    if _is_pid_alive(pid):
        print("Warning: Server may still be running.")
    else:
        print("Server stopped.")


def cmd_restart(args: argparse.Namespace) -> None:
    cmd_stop(args)
    cmd_start(args)


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file, but port {args.port} is in use.")
    else:
        print(f"Server is not running (port {args.port} is free).")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations to the configured database."""
    from stockroom.config import configure_logging
    from stockroom.core.exceptions import MigrationError
    from stockroom.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    configure_logging()
    db_path = Path(args.db_path) if args.db_path else None
    try:
        results = asyncio.run(run_migrations(db_path, create_backup_before=not args.no_backup))
    except MigrationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    if not results:
        print("Database is up to date.")
    for r in results:
        print(f"  v{r.version} {r.name}: OK ({r.execution_time_ms}ms)")


def cmd_migrate_status(args: argparse.Namespace) -> None:
    """Show migration status of the configured database."""
    from stockroom.infrastructure.storage.sqlite.migrations.migrator import (
        get_migration_status,
        verify_schema_integrity,
    )

    db_path = Path(args.db_path) if args.db_path else None
    status = asyncio.run(get_migration_status(db_path))

    print(f"Current version: {status['current_version'] or 'none'}")
    print(f"Applied: {len(status['applied_migrations'])}  Pending: {len(status['pending_migrations'])}")
    for version in status["pending_migrations"]:
        print(f"  pending: {version}")

    if args.verify and status["exists"]:
        failed = False
        for check in asyncio.run(verify_schema_integrity(db_path)):
            print(f"[{check['status']}] {check['check']}")
            failed = failed or check["status"] != "PASS"
        if failed:
            sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stockroom management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server"),
        ("restart", cmd_restart, "Restart the server"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
        p.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
        p.set_defaults(func=func)

    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    p_status = sub.add_parser("status", help="Check if server is running")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--db-path", help="Database path (default from settings)")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    p_mstatus = sub.add_parser("migrate-status", help="Show migration status")
    p_mstatus.add_argument("--db-path", help="Database path (default from settings)")
    p_mstatus.add_argument("--verify", action="store_true", help="Also run schema integrity checks")
    p_mstatus.set_defaults(func=cmd_migrate_status)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
