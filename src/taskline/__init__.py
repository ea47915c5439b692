"""taskline: personal task list with a status lifecycle and an append-only audit trail."""

__version__ = "0.1.0"
