# src/taskline/tasks/task_errors.py

"""
Business-rule failures raised by the task core.

Every error carries a stable `code` so the request layer can map it to a
user-facing message without string matching. None of them are retryable:
they describe invalid caller input, not a transient fault. HistoryWriteFailed is
the exception: the audit log backend failed and the change was rolled back.
"""

from __future__ import annotations


class TaskError(ValueError):
    code = "TaskError"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class TitleRequired(TaskError):
    code = "TitleRequired"


class TitleTooLong(TaskError):
    code = "TitleTooLong"


class DescriptionTooLong(TaskError):
    code = "DescriptionTooLong"


class PastDueDate(TaskError):
    code = "PastDueDate"


class IllegalStatusTransition(TaskError):
    code = "IllegalStatusTransition"


class InvalidDueDate(TaskError):
    code = "InvalidDueDate"


class InvalidDueTime(TaskError):
    code = "InvalidDueTime"


class InvalidImportance(TaskError):
    code = "InvalidImportance"


class InvalidStatus(TaskError):
    code = "InvalidStatus"


class InvalidFilter(TaskError):
    code = "InvalidFilter"


class HistoryWriteFailed(TaskError):
    """The audit entry for a change could not be written; the change was rolled back."""

    code = "HistoryWriteFailed"
