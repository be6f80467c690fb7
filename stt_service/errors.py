"""Typed errors raised by the operation layer."""

from typing import Literal

ErrorCode = Literal["UNAUTHORIZED", "NOT_FOUND"]

STATUS_CODES: dict[str, int] = {
    "UNAUTHORIZED": 401,
    "NOT_FOUND": 404,
}


class ActionError(Exception):
    """Operation failure carrying a machine-readable code."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        self.status_code = STATUS_CODES[code]
        super().__init__(message)


def job_not_found() -> ActionError:
    return ActionError(code="NOT_FOUND", message="Speech-to-text job not found.")
