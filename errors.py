"""Error taxonomy for catalog loading and level sessions.

An incorrect answer is not an error: validation returns a plain boolean.
"""


class QuizError(Exception):
    """Base class for all errors raised by the quiz engine."""


class ParseError(QuizError, ValueError):
    """A level or exercise record is malformed.

    Raised per record; the catalog loader catches it, logs it, and skips the
    record so the rest of the level still loads.
    """

    def __init__(self, reason: str, position: int | None = None):
        self.reason = reason
        self.position = position
        if position is None:
            super().__init__(reason)
        else:
            super().__init__(f"record {position}: {reason}")


class LevelNotFoundError(QuizError, LookupError):
    """The requested level id is absent from the catalog."""

    def __init__(self, level_id: int):
        self.level_id = level_id
        super().__init__(f"Level {level_id} does not exist in the catalog")


class InvalidStateError(QuizError, RuntimeError):
    """A level session operation was called in a state that does not allow it."""

    def __init__(self, operation: str, status: str, detail: str = ""):
        self.operation = operation
        self.status = status
        message = f"Cannot {operation} while session is {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
