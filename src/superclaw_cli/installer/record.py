"""Persisted marker of a completed dashboard installation."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from superclaw_cli.core.atomic import atomic_write_json
from superclaw_cli.core.constants import INSTALL_RECORD_FILENAME
from superclaw_cli.errors import InstallRecordError

logger = logging.getLogger(__name__)

Tier = Literal["free", "pro"]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InstallationRecord(BaseModel):
    install_dir: str
    installed_at: str = Field(default_factory=_utc_now)
    tier: Tier = "free"
    source_version: Optional[str] = None
    source_url: Optional[str] = None
    license_activated_at: Optional[str] = None

    @property
    def is_pro(self) -> bool:
        return self.tier == "pro"


def record_path(install_dir: Path) -> Path:
    return install_dir / INSTALL_RECORD_FILENAME


def has_record(install_dir: Path) -> bool:
    return record_path(install_dir).is_file()


def load_record(install_dir: Path) -> Optional[InstallationRecord]:
    """Return the record, or None if the directory was never installed into."""
    path = record_path(install_dir)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return InstallationRecord.model_validate(data)
    except (OSError, ValueError) as exc:
        raise InstallRecordError(
            f"Installation record at {path} is unreadable: {exc}",
            "Re-run 'superclaw init --force' to reinstall the dashboard.",
        ) from exc


def save_record(record: InstallationRecord) -> Path:
    path = record_path(Path(record.install_dir))
    try:
        atomic_write_json(path, record.model_dump(mode="json"))
    except OSError as exc:
        raise InstallRecordError(
            f"Could not write installation record {path}: {exc}",
            "Check that the install directory is writable and re-run 'superclaw init'.",
        ) from exc
    logger.debug("Saved installation record %s", path)
    return path


def set_tier(install_dir: Path, tier: Tier) -> InstallationRecord:
    """Change the tier of an existing installation, stamping the activation time."""
    record = load_record(install_dir)
    if record is None:
        raise InstallRecordError(
            f"No SuperClaw installation found in {install_dir}.",
            "Run 'superclaw init' first, or pass --dir pointing at the dashboard.",
        )
    record.tier = tier
    record.license_activated_at = _utc_now() if tier == "pro" else None
    save_record(record)
    return record


__all__ = [
    "InstallationRecord",
    "Tier",
    "record_path",
    "has_record",
    "load_record",
    "save_record",
    "set_tier",
]
