"""CLI helpers exposed for other modules."""

from .prompts import Prompter, TyperPrompter, is_interactive
from .ui import Printer, StepTracker, select_with_arrows

__all__ = [
    "Printer",
    "Prompter",
    "StepTracker",
    "TyperPrompter",
    "is_interactive",
    "select_with_arrows",
]
