"""Exception types shared across the pipeline.

Run-level cancellation is not modelled here: it surfaces as
``asyncio.CancelledError`` (task cancelled) or ``TimeoutError`` (deadline
elapsed) and always propagates to the caller.
"""


class NewsBotError(Exception):
    """Base class for all newsbot errors."""


class StageFailure(NewsBotError):
    """A whole pipeline stage failed and the run was aborted."""

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} stage failed: {cause}")


class ItemSkipped(NewsBotError):
    """One item could not be processed; the run continues without it."""

    def __init__(self, source_id: str, step: str, cause: BaseException):
        self.source_id = source_id
        self.step = step
        self.cause = cause
        super().__init__(f"item {source_id} skipped at {step}: {cause}")


class InvalidInput(NewsBotError, ValueError):
    """Caller passed input that can never succeed; no call was made."""


class EmptyInput(InvalidInput):
    """Text was blank after trimming whitespace."""


class ServiceError(NewsBotError):
    """An external service reported a failure."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EmptyResult(NewsBotError):
    """An external service succeeded but returned nothing usable."""


class CollectionError(NewsBotError):
    """A source feed could not be fetched or parsed."""
