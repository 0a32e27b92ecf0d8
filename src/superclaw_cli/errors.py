"""Exception hierarchy for SuperClaw CLI operations.

Every error carries a short ``remediation`` string so the command layer can
print the cause and at least one concrete next step.
"""

from __future__ import annotations


class SuperclawError(Exception):
    """Base exception for SuperClaw CLI errors."""

    default_remediation = "Run 'superclaw doctor' for troubleshooting help."

    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation or self.default_remediation
        super().__init__(message)


class PreconditionError(SuperclawError):
    """A required tool, runtime or confirmation is missing."""


class AcquisitionError(SuperclawError):
    """Fetching the dashboard source failed (network or auth)."""

    default_remediation = (
        "Check your network connection and repository access, "
        "then re-run 'superclaw init'."
    )


class DependencyInstallError(SuperclawError):
    """Dependency resolution for the dashboard failed."""

    default_remediation = "Run 'npm install' in the dashboard directory to see the full error."


class InstallRecordError(SuperclawError):
    """The installation record could not be written or read."""


class StoreError(SuperclawError):
    """Base class for user store failures."""


class DuplicateEmail(StoreError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(
            f"User {email} already exists.",
            f"Use 'superclaw setup user reset {email}' to issue a new password.",
        )


class InvalidEmail(StoreError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(
            f"'{email}' is not a valid email address.",
            "Provide an address containing '@', e.g. ops@example.com.",
        )


class InvalidRole(StoreError):
    def __init__(self, role: str):
        self.role = role
        super().__init__(
            f"Unknown role '{role}'.",
            "Role must be one of: view, edit, admin.",
        )


class UserNotFound(StoreError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(
            f"User {email} not found.",
            "Run 'superclaw setup user list' to see existing users.",
        )


class StoreMissing(StoreError):
    default_remediation = "Run 'superclaw setup' first to create the admin account."


class LaunchError(SuperclawError):
    """The dashboard process could not be spawned or signalled."""


class WorkspaceNotFound(SuperclawError):
    default_remediation = "Run 'superclaw init' to create a workspace first."


class LicenseError(SuperclawError):
    default_remediation = "Get a license at: https://skunkglobal.com/superclaw-pro/checkout"


__all__ = [
    "SuperclawError",
    "PreconditionError",
    "AcquisitionError",
    "DependencyInstallError",
    "InstallRecordError",
    "StoreError",
    "DuplicateEmail",
    "InvalidEmail",
    "InvalidRole",
    "UserNotFound",
    "StoreMissing",
    "LaunchError",
    "WorkspaceNotFound",
    "LicenseError",
]
