from typing import Optional, Tuple


class BrotliStreamError(Exception):
    """
    Base class for every error raised by brotlistream itself.
    """

    ...


class ConfigError(BrotliStreamError, ValueError):
    """
    An option was set outside the range the engine accepts.

    Raised while building `EncodeOptions`/`DecodeOptions`, never afterwards.
    """

    def __init__(self, field: str, value: object, bounds: Tuple[int, int]) -> None:
        self.field = field
        self.value = value
        self.bounds = bounds
        lo, hi = bounds
        super().__init__(f"{field} must be in range [{lo}, {hi}], got {value!r}")


class EngineError(BrotliStreamError):
    """
    The engine failed: malformed compressed input, or an internal encoder fault.

    Fatal; the adapter that saw it is poisoned and re-raises it from then on.
    """

    ...


class CompressionError(EngineError):
    """
    brotlistream specific exception representing a failed compression operation.
    """

    ...


class DecompressionError(EngineError):
    """
    brotlistream specific exception representing a failed decompression operation.
    """

    ...


class StreamStateError(BrotliStreamError, ValueError):
    """
    An operation was attempted in a state that does not allow it,
    e.g. writing to a stream that has already been finished.
    """

    def __init__(self, message: str, state: Optional[str] = None) -> None:
        self.state = state
        super().__init__(message)
