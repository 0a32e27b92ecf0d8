"""Statistics, backup and retention for the workspace memory logs."""

from __future__ import annotations

import gzip
import logging
import shutil
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from superclaw_cli.core.constants import MEMORY_DIR, MEMORY_FILENAME
from superclaw_cli.errors import SuperclawError

logger = logging.getLogger(__name__)

ARCHIVE_DIR = "archive"
BACKUPS_DIR = "backups"
DEFAULT_RETENTION_DAYS = 30


class MemoryLogError(SuperclawError):
    default_remediation = "Re-run 'superclaw init' to recreate the memory directory."


@dataclass
class MemoryStats:
    daily_files: int = 0
    archived_files: int = 0
    total_bytes: int = 0
    first_date: Optional[date] = None
    last_date: Optional[date] = None
    long_term_bytes: Optional[int] = None
    long_term_updated: Optional[date] = None


@dataclass
class CleanResult:
    cutoff: date
    archived: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.archived) + len(self.deleted)


def _memory_dir(workspace_dir: Path) -> Path:
    memory_dir = workspace_dir / MEMORY_DIR
    if not memory_dir.is_dir():
        raise MemoryLogError(f"Memory directory not found in {workspace_dir}.")
    return memory_dir


def log_date(path: Path) -> date:
    """Date of a daily log: its ``YYYY-MM-DD`` name, else its modification day."""
    try:
        return date.fromisoformat(path.stem)
    except ValueError:
        return datetime.fromtimestamp(path.stat().st_mtime).date()


def daily_logs(workspace_dir: Path) -> list[Path]:
    return sorted(p for p in _memory_dir(workspace_dir).glob("*.md") if p.is_file())


def memory_stats(workspace_dir: Path) -> MemoryStats:
    logs = daily_logs(workspace_dir)
    stats = MemoryStats(daily_files=len(logs))
    dates = sorted(log_date(p) for p in logs)
    if dates:
        stats.first_date, stats.last_date = dates[0], dates[-1]
    stats.total_bytes = sum(p.stat().st_size for p in logs)

    archive = workspace_dir / MEMORY_DIR / ARCHIVE_DIR
    if archive.is_dir():
        stats.archived_files = sum(1 for p in archive.iterdir() if p.suffix in (".md", ".gz"))

    long_term = workspace_dir / MEMORY_FILENAME
    if long_term.is_file():
        st = long_term.stat()
        stats.long_term_bytes = st.st_size
        stats.long_term_updated = datetime.fromtimestamp(st.st_mtime).date()
    return stats


def backup_memory(
    workspace_dir: Path,
    dest: Optional[Path] = None,
    include_archive: bool = False,
    now: Optional[datetime] = None,
) -> Path:
    """Copy ``memory/`` and ``MEMORY.md`` into a new timestamped directory.

    The backup lands in ``<dest>/memory-backup-YYYYmmdd-HHMMSS`` where *dest*
    defaults to ``<workspace>/backups``. An existing target is never reused.
    """
    memory_dir = _memory_dir(workspace_dir)
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    target = (dest or workspace_dir / BACKUPS_DIR) / f"memory-backup-{stamp}"
    if target.exists():
        raise MemoryLogError(f"Backup directory {target} already exists.", "Wait a second and try again.")

    ignore = None if include_archive else shutil.ignore_patterns(ARCHIVE_DIR)
    try:
        shutil.copytree(memory_dir, target / MEMORY_DIR, ignore=ignore)
        long_term = workspace_dir / MEMORY_FILENAME
        if long_term.is_file():
            shutil.copy2(long_term, target / MEMORY_FILENAME)
    except OSError as exc:
        raise MemoryLogError(
            f"Backup to {target} failed: {exc}",
            "Check free space and permissions of the backup location.",
        ) from exc
    logger.info("Backed up memory of %s to %s", workspace_dir, target)
    return target


def clean_memory(
    workspace_dir: Path,
    retention_days: int = DEFAULT_RETENTION_DAYS,
    archive: bool = True,
    dry_run: bool = False,
    today: Optional[date] = None,
) -> CleanResult:
    """Archive (gzip) or delete daily logs older than *retention_days*.

    ``MEMORY.md`` and today's log are never touched.
    """
    if retention_days < 1:
        raise MemoryLogError("Retention must be at least one day.", "Pass --days 1 or more.")
    cutoff = (today or date.today()) - timedelta(days=retention_days)
    result = CleanResult(cutoff=cutoff)
    archive_dir = workspace_dir / MEMORY_DIR / ARCHIVE_DIR

    for path in daily_logs(workspace_dir):
        if log_date(path) >= cutoff:
            continue
        if dry_run:
            (result.archived if archive else result.deleted).append(path.name)
            continue
        if archive:
            archive_dir.mkdir(parents=True, exist_ok=True)
            with path.open("rb") as src, gzip.open(archive_dir / f"{path.name}.gz", "wb") as dst:
                shutil.copyfileobj(src, dst)
            result.archived.append(path.name)
        else:
            result.deleted.append(path.name)
        path.unlink()
    logger.info("Memory clean of %s: %d file(s) older than %s", workspace_dir, result.count, cutoff)
    return result


__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "CleanResult",
    "MemoryLogError",
    "MemoryStats",
    "backup_memory",
    "clean_memory",
    "daily_logs",
    "log_date",
    "memory_stats",
]
