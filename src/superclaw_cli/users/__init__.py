"""Dashboard account management."""

from .hashing import BcryptHasher
from .provisioning import AdminProvisioner, DuplicateResolution, ProvisionResult, ProvisionState
from .store import (
    CreatedUser,
    Role,
    User,
    UserStore,
    UserSummary,
    generate_password,
    open_user_store,
)

__all__ = [
    "AdminProvisioner",
    "BcryptHasher",
    "CreatedUser",
    "DuplicateResolution",
    "ProvisionResult",
    "ProvisionState",
    "Role",
    "User",
    "UserStore",
    "UserSummary",
    "generate_password",
    "open_user_store",
]
