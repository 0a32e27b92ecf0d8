"""First-run admin provisioning as an explicit state machine.

States::

    ASK_EMAIL -> CONFIRM -> COMMIT -> DONE
        |           ^
        v           |
    RESOLVE_DUPLICATE -> ABORTED

When the requested email already exists the operator must pick one of the
recovery branches; nothing is overwritten without an explicit choice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from superclaw_cli.cli.prompts import Prompter
from superclaw_cli.cli.ui import Printer
from superclaw_cli.errors import InvalidEmail
from superclaw_cli.users.store import Role, UserStore, validate_email

logger = logging.getLogger(__name__)

MAX_EMAIL_ATTEMPTS = 5


class ProvisionState(StrEnum):
    ASK_EMAIL = "ask_email"
    RESOLVE_DUPLICATE = "resolve_duplicate"
    CONFIRM = "confirm"
    COMMIT = "commit"
    DONE = "done"
    ABORTED = "aborted"


class DuplicateResolution(StrEnum):
    """Recovery branches offered when the admin email is already taken."""

    DIFFERENT_EMAIL = "different_email"
    RESET_PASSWORD = "reset_password"
    RECREATE_STORE = "recreate_store"
    ABORT = "abort"


class ProvisionAction(StrEnum):
    CREATE = "create"
    RESET = "reset"
    RECREATE = "recreate"


DUPLICATE_CHOICES: dict[str, str] = {
    DuplicateResolution.DIFFERENT_EMAIL.value: "Use a different email address",
    DuplicateResolution.RESET_PASSWORD.value: "Reset the existing user's password",
    DuplicateResolution.RECREATE_STORE.value: "Delete ALL users and start a fresh database",
    DuplicateResolution.ABORT.value: "Cancel setup",
}


@dataclass
class ProvisionResult:
    state: ProvisionState
    email: Optional[str] = None
    password: Optional[str] = None
    action: Optional[ProvisionAction] = None

    @property
    def succeeded(self) -> bool:
        return self.state is ProvisionState.DONE


class AdminProvisioner:
    """Drive the admin-account flow against a store and a prompter."""

    def __init__(
        self,
        store: UserStore,
        prompter: Prompter,
        printer: Printer | None = None,
        email: Optional[str] = None,
        max_email_attempts: int = MAX_EMAIL_ATTEMPTS,
    ):
        self.store = store
        self.prompter = prompter
        self.printer = printer or Printer()
        self.max_email_attempts = max_email_attempts
        self._preset_email = email
        self._email_attempts = 0
        self.result = ProvisionResult(state=ProvisionState.ASK_EMAIL)
        self._handlers: dict[ProvisionState, Callable[[], ProvisionState]] = {
            ProvisionState.ASK_EMAIL: self._ask_email,
            ProvisionState.RESOLVE_DUPLICATE: self._resolve_duplicate,
            ProvisionState.CONFIRM: self._confirm,
            ProvisionState.COMMIT: self._commit,
        }

    def run(self) -> ProvisionResult:
        state = self.result.state
        while state not in (ProvisionState.DONE, ProvisionState.ABORTED):
            logger.debug("Admin provisioning state: %s", state)
            state = self._handlers[state]()
            self.result.state = state
        return self.result

    def _ask_email(self) -> ProvisionState:
        if self._email_attempts >= self.max_email_attempts:
            self.printer.error("Too many invalid email addresses.")
            return ProvisionState.ABORTED
        self._email_attempts += 1

        if self._preset_email is not None:
            raw, self._preset_email = self._preset_email, None
        else:
            raw = self.prompter.ask("Admin email address")

        try:
            email = validate_email(raw)
        except InvalidEmail:
            self.printer.error("Please enter a valid email address")
            return ProvisionState.ASK_EMAIL

        self.result.email = email
        if self.store.get_user(email) is not None:
            return ProvisionState.RESOLVE_DUPLICATE
        self.result.action = ProvisionAction.CREATE
        return ProvisionState.CONFIRM

    def _resolve_duplicate(self) -> ProvisionState:
        email = self.result.email
        self.printer.warn(f"User {email} already exists.")
        choice = DuplicateResolution(
            self.prompter.choose(
                "What would you like to do?",
                DUPLICATE_CHOICES,
                default=DuplicateResolution.DIFFERENT_EMAIL.value,
            )
        )

        if choice is DuplicateResolution.DIFFERENT_EMAIL:
            self.result.email = None
            return ProvisionState.ASK_EMAIL
        if choice is DuplicateResolution.RESET_PASSWORD:
            self.result.action = ProvisionAction.RESET
            return ProvisionState.CONFIRM
        if choice is DuplicateResolution.RECREATE_STORE:
            self.result.action = ProvisionAction.RECREATE
            return ProvisionState.CONFIRM
        return ProvisionState.ABORTED

    def _confirm(self) -> ProvisionState:
        email = self.result.email
        action = self.result.action

        if action is ProvisionAction.CREATE:
            if self.prompter.confirm(f"Create admin account for {email}?", default=True):
                return ProvisionState.COMMIT
            return ProvisionState.ABORTED

        if action is ProvisionAction.RESET:
            question = f"Reset the password for {email}? All of its sessions will be signed out."
        else:
            question = f"Delete every user and session in {self.store.db_path}? This cannot be undone."

        if self.prompter.confirm(question, default=False):
            return ProvisionState.COMMIT
        return ProvisionState.RESOLVE_DUPLICATE

    def _commit(self) -> ProvisionState:
        email = self.result.email
        action = self.result.action
        assert email is not None and action is not None

        if action is ProvisionAction.RESET:
            self.result.password = self.store.reset_password(email)
        else:
            if action is ProvisionAction.RECREATE:
                self.store.recreate()
            created = self.store.create_user(email, Role.ADMIN)
            self.result.password = created.password
        return ProvisionState.DONE


__all__ = [
    "AdminProvisioner",
    "DUPLICATE_CHOICES",
    "DuplicateResolution",
    "ProvisionAction",
    "ProvisionResult",
    "ProvisionState",
]
