"""SQLite-backed account store shared with the dashboard.

The dashboard reads the same ``users`` and ``sessions`` tables at runtime;
this module owns creating accounts, rotating passwords and revoking
sessions from the command line.
"""

from __future__ import annotations

import logging
import secrets
import sqlite3
import string
import time
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Optional

from superclaw_cli.core.home import get_user_db_path
from superclaw_cli.errors import (
    DuplicateEmail,
    InvalidEmail,
    InvalidRole,
    StoreMissing,
    UserNotFound,
)
from superclaw_cli.users.hashing import BcryptHasher

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "!@#$%^&*"
PASSWORD_LENGTH = 16
DEFAULT_SESSION_TTL_MS = 7 * 24 * 60 * 60 * 1000

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'view',
    created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now') * 1000),
    last_login INTEGER,
    created_by INTEGER,
    FOREIGN KEY (created_by) REFERENCES users(id)
);

CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    user_id INTEGER NOT NULL,
    expires_at INTEGER NOT NULL,
    created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now') * 1000),
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id);
CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at);
"""


class Role(StrEnum):
    """Dashboard permission level."""

    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Return a random password drawn from ``PASSWORD_ALPHABET``."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def validate_email(email: str) -> str:
    """Return *email* stripped, or raise ``InvalidEmail`` when it lacks '@'."""
    cleaned = (email or "").strip()
    if "@" not in cleaned:
        raise InvalidEmail(cleaned)
    return cleaned


def parse_role(role: str | Role) -> Role:
    try:
        return Role(str(role).strip().lower())
    except ValueError:
        raise InvalidRole(str(role)) from None


@dataclass(frozen=True)
class User:
    id: int
    email: str
    password_hash: str
    role: Role
    created_at: int
    last_login: Optional[int]
    created_by: Optional[int]


@dataclass(frozen=True)
class UserSummary:
    """Listing row; never carries the password hash."""

    id: int
    email: str
    role: Role
    created_at: int
    last_login: Optional[int]


@dataclass(frozen=True)
class CreatedUser:
    """A freshly created account plus its one-time plaintext password."""

    user: User
    password: str


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=int(row["id"]),
        email=str(row["email"]),
        password_hash=str(row["password_hash"]),
        role=Role(row["role"]),
        created_at=int(row["created_at"]),
        last_login=int(row["last_login"]) if row["last_login"] is not None else None,
        created_by=int(row["created_by"]) if row["created_by"] is not None else None,
    )


class UserStore:
    """Single-writer store over the ``users`` and ``sessions`` tables."""

    def __init__(self, db_path: Path, hasher: BcryptHasher | None = None) -> None:
        self.db_path = db_path
        self.hasher = hasher or BcryptHasher()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        # Cascade deletes are off by default in SQLite
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    # -- Users ---------------------------------------------------------------

    def create_user(
        self,
        email: str,
        role: str | Role = Role.VIEW,
        created_by: Optional[int] = None,
    ) -> CreatedUser:
        """Create an account with a generated password.

        Raises:
            InvalidEmail: *email* has no '@'.
            InvalidRole: *role* is not view, edit or admin.
            DuplicateEmail: an account with exactly this email exists.
        """
        email = validate_email(email)
        role = parse_role(role)

        if self.get_user(email) is not None:
            raise DuplicateEmail(email)

        password = generate_password()
        password_hash = self.hasher.hash(password)
        created_at = _now_ms()

        conn = self._connect()
        try:
            with conn:
                cursor = conn.execute(
                    "INSERT INTO users (email, password_hash, role, created_at, created_by) VALUES (?, ?, ?, ?, ?)",
                    (email, password_hash, role.value, created_at, created_by),
                )
            user_id = int(cursor.lastrowid)
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc).upper():
                raise DuplicateEmail(email) from exc
            raise
        finally:
            conn.close()

        logger.info("Created %s user %s (id=%d)", role.value, email, user_id)
        user = User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=created_at,
            last_login=None,
            created_by=created_by,
        )
        return CreatedUser(user=user, password=password)

    def get_user(self, email: str) -> Optional[User]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        finally:
            conn.close()
        return _row_to_user(row) if row is not None else None

    def _require_user(self, email: str) -> User:
        user = self.get_user(email)
        if user is None:
            raise UserNotFound(email)
        return user

    def count_users(self) -> int:
        conn = self._connect()
        try:
            row = conn.execute("SELECT COUNT(*) AS count FROM users").fetchone()
        finally:
            conn.close()
        return int(row["count"])

    def list_users(self) -> list[UserSummary]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT id, email, role, created_at, last_login FROM users ORDER BY id ASC"
            ).fetchall()
        finally:
            conn.close()

        return [
            UserSummary(
                id=int(row["id"]),
                email=str(row["email"]),
                role=Role(row["role"]),
                created_at=int(row["created_at"]),
                last_login=int(row["last_login"]) if row["last_login"] is not None else None,
            )
            for row in rows
        ]

    def delete_user(self, email: str) -> None:
        """Delete the account; its sessions go with it via ON DELETE CASCADE."""
        user = self._require_user(email)
        conn = self._connect()
        try:
            with conn:
                # Accounts this user created keep existing, without a creator
                conn.execute("UPDATE users SET created_by = NULL WHERE created_by = ?", (user.id,))
                conn.execute("DELETE FROM users WHERE id = ?", (user.id,))
        finally:
            conn.close()
        logger.info("Deleted user %s (id=%d)", email, user.id)

    def reset_password(self, email: str) -> str:
        """Issue a new password and revoke every session of the account."""
        user = self._require_user(email)
        password = generate_password()
        password_hash = self.hasher.hash(password)

        conn = self._connect()
        try:
            with conn:
                conn.execute("UPDATE users SET password_hash = ? WHERE id = ?", (password_hash, user.id))
                revoked = conn.execute("DELETE FROM sessions WHERE user_id = ?", (user.id,)).rowcount
        finally:
            conn.close()

        logger.info("Reset password for %s, revoked %d session(s)", email, revoked)
        return password

    def verify_password(self, email: str, password: str) -> bool:
        user = self.get_user(email)
        if user is None:
            return False
        return self.hasher.verify(password, user.password_hash)

    def record_login(self, email: str, at: Optional[int] = None) -> None:
        user = self._require_user(email)
        conn = self._connect()
        try:
            with conn:
                conn.execute("UPDATE users SET last_login = ? WHERE id = ?", (at or _now_ms(), user.id))
        finally:
            conn.close()

    # -- Sessions ------------------------------------------------------------

    def create_session(self, user_id: int, ttl_ms: int = DEFAULT_SESSION_TTL_MS) -> str:
        """Insert a login session the way the dashboard does on sign-in."""
        session_id = secrets.token_hex(32)
        now = _now_ms()
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO sessions (id, user_id, expires_at, created_at) VALUES (?, ?, ?, ?)",
                    (session_id, user_id, now + ttl_ms, now),
                )
        finally:
            conn.close()
        return session_id

    def count_sessions(self, user_id: Optional[int] = None) -> int:
        conn = self._connect()
        try:
            if user_id is None:
                row = conn.execute("SELECT COUNT(*) AS count FROM sessions").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) AS count FROM sessions WHERE user_id = ?", (user_id,)
                ).fetchone()
        finally:
            conn.close()
        return int(row["count"])

    def purge_expired_sessions(self, now: Optional[int] = None) -> int:
        conn = self._connect()
        try:
            with conn:
                purged = conn.execute(
                    "DELETE FROM sessions WHERE expires_at <= ?", (now if now is not None else _now_ms(),)
                ).rowcount
        finally:
            conn.close()
        return purged

    # -- Store lifecycle -----------------------------------------------------

    def recreate(self) -> None:
        """Delete the database file and bootstrap an empty schema."""
        for suffix in ("", "-wal", "-shm", "-journal"):
            Path(f"{self.db_path}{suffix}").unlink(missing_ok=True)
        logger.warning("Recreated user store at %s", self.db_path)
        self._init_db()


def open_user_store(
    db_path: Path | None = None,
    *,
    create: bool = False,
    hasher: BcryptHasher | None = None,
) -> UserStore:
    """Open the account store, bootstrapping the schema.

    Raises:
        StoreMissing: the database file does not exist and *create* is False.
    """
    path = db_path or get_user_db_path()
    if not create and not path.exists():
        raise StoreMissing(f"No user database found at {path}.")
    return UserStore(path, hasher=hasher)


__all__ = [
    "PASSWORD_ALPHABET",
    "PASSWORD_LENGTH",
    "Role",
    "User",
    "UserSummary",
    "CreatedUser",
    "UserStore",
    "generate_password",
    "validate_email",
    "parse_role",
    "open_user_store",
]
