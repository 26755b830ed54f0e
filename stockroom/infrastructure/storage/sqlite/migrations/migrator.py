"""
Versioned SQL migrations for the inventory database.

Files named ``vNNN_name.sql`` in this package are applied in version order
and recorded in ``schema_migrations`` together with a checksum of their
contents. A run stops at the first problem and raises MigrationError:

- an applied file whose checksum no longer matches
- a script that errors part way through
- foreign key violations left behind by a script

A database that existed before the run is snapshotted first and restored
from that snapshot when the run fails.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockroom.config import get_logger, get_settings
from stockroom.core.exceptions import MigrationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = (
    "categories",
    "inventory_items",
    "batches",
    "id_sequences",
    "schema_migrations",
)


@dataclass(frozen=True)
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=checksum,
        )


@dataclass
class MigrationResult:
    """A migration applied by the current run."""

    version: str
    name: str
    execution_time_ms: int


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in version order; misnamed files are logged and skipped."""
    migrations = []
    for path in sorted(migrations_dir.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map each applied version to the checksum it was applied with."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        # Fresh database without the tracking table
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


def pending_migrations(
    migrations: list[MigrationInfo],
    applied: dict[str, str],
) -> list[MigrationInfo]:
    """
    Select the migrations that still have to run.

    Raises:
        MigrationError: If an applied migration's file changed afterwards.
    """
    pending = []
    for migration in migrations:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise MigrationError(
                migration.version,
                f"checksum changed after it was applied "
                f"(recorded {recorded}, found {migration.checksum})",
            )
    return pending


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """
    Run one migration script, record it and check foreign keys.

    Raises:
        MigrationError: If the script fails or leaves dangling references.
    """
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
        raise MigrationError(migration.version, str(e)) from e

    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = await cursor.fetchall()
    if violations:
        raise MigrationError(
            migration.version, f"{len(violations)} foreign key violation(s)"
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed_ms,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed_ms,
    )


async def _copy_database(source: Path, target: Path) -> None:
    # SQLite online backup, so frames still in the -wal file are included
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def create_backup(db_path: Path) -> Path:
    """Snapshot the database next to the original file."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{timestamp}.db")
    await _copy_database(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    """Overwrite the database contents with a snapshot."""
    await _copy_database(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Args:
        db_path: Path to database file (default from settings)
        create_backup_before: Snapshot an existing database before applying
            anything; the snapshot is removed again on success
        migrations_dir: Directory holding the ``vNNN_name.sql`` files

    Returns:
        Migrations applied by this run, in order; empty when up to date

    Raises:
        MigrationError: If any migration cannot be applied. The database is
            restored from its snapshot before the error propagates.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()

    migrations = discover_migrations(migrations_dir)
    if not migrations:
        logger.warning("no_migrations_found", migrations_dir=str(migrations_dir))
        return []

    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending = pending_migrations(migrations, await get_applied_migrations(conn))
            if pending and create_backup_before and existed:
                backup_path = await create_backup(db_path)

            for migration in pending:
                results.append(await apply_migration(conn, migration))

    except Exception as e:
        logger.error(
            "database_initialization_failed",
            db_path=str(db_path),
            applied=[r.version for r in results],
            error=str(e),
        )
        if backup_path is not None:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        backup_path.unlink()
        logger.info("backup_cleaned_up")

    logger.info("database_initialized", applied=[r.version for r in results])
    return results


# Alias used by the application lifespan
run_migrations = initialize_database


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> dict:
    """Applied and pending versions of the database; never creates the file."""
    db_path = db_path or get_settings().storage.db_path
    exists = db_path.exists()
    discovered = discover_migrations(migrations_dir)

    applied: dict[str, str] = {}
    if exists:
        async with aiosqlite.connect(db_path) as conn:
            applied = await get_applied_migrations(conn)

    return {
        "exists": exists,
        "current_version": max(applied) if applied else None,
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Run SQLite integrity and foreign key checks and look for missing tables."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        {"check": "integrity", "status": "PASS" if integrity == "ok" else "FAIL", "result": integrity},
        {"check": "foreign_keys", "status": "FAIL" if fk_violations else "PASS", "violations": fk_violations},
        {"check": "required_tables", "status": "FAIL" if missing else "PASS", "missing": missing},
    ]
