"""License tier handling for an installed dashboard."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from superclaw_cli.errors import LicenseError
from superclaw_cli.installer.record import InstallationRecord, load_record, set_tier

logger = logging.getLogger(__name__)

LICENSE_KEY_PATTERN = re.compile(r"^[A-Z0-9-]{20,}$", re.IGNORECASE)
CHECKOUT_URL = "https://skunkglobal.com/superclaw-pro/checkout"


def is_valid_key(key: str | None) -> bool:
    """Format check only; keys are not verified against a remote service."""
    return bool(key) and LICENSE_KEY_PATTERN.match(key.strip()) is not None


def current_tier(install_dir: Path) -> str:
    record = load_record(install_dir)
    return record.tier if record else "free"


def activate(install_dir: Path, key: str) -> InstallationRecord:
    if not is_valid_key(key):
        raise LicenseError("Invalid license key.", f"Get a license at: {CHECKOUT_URL}")
    record = set_tier(install_dir, "pro")
    logger.info("Activated pro tier for %s", install_dir)
    return record


__all__ = ["CHECKOUT_URL", "LICENSE_KEY_PATTERN", "activate", "current_tier", "is_valid_key"]
