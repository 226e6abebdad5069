from typing import Any


class NotFoundError(Exception):
    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind


class StorageError(Exception):
    pass


class ConflictError(Exception):
    pass


class IncompleteSubmissionError(Exception):
    def __init__(self, missing: list[dict[str, Any]]) -> None:
        super().__init__(f"{len(missing)} required question(s) unanswered")
        self.missing = missing
