import enum
import io
import logging

from .engine import Engine, Operation, ProcessResult
from .errors import EngineError, StreamStateError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 32 * 1024


class State(enum.Enum):
    ACTIVE = "active"
    FLUSHED = "flushed"
    FINISHED = "finished"


class StreamAdapter(io.RawIOBase):
    """
    State machine shared by the four stream adapters.

    Every engine call and every call into the wrapped object goes through
    `_process`, `_pull` or `_push`, so a failure in any of them poisons the
    adapter in a single place.
    """

    # class level so that __del__ -> close() is safe even if __init__ failed
    _closed = True
    _engine = None
    _error = None

    def __init__(self, inner, engine: Engine, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__()
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._inner = inner
        self._engine = engine
        self._buffer_size = buffer_size
        self._state = State.ACTIVE
        self._closed = False

    def __repr__(self):
        name = type(self).__name__
        state = "closed" if self._closed else self._state.value
        if self._error is not None:
            state = "poisoned"
        return f"<{name} state={state} inner={self._inner!r}>"

    @property
    def inner(self):
        """The wrapped source or sink."""
        return self._inner

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_usable(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed stream.")
        if self._error is not None:
            raise self._error

    def _check_active(self, action: str) -> None:
        self._check_usable()
        if self._state is State.FINISHED:
            raise StreamStateError(
                f"Cannot {action} after the stream was finished", self._state.value
            )

    def _poison(self, exc: BaseException) -> None:
        logger.debug("%s poisoned by %r", type(self).__name__, exc)
        self._error = exc
        self._state = State.FINISHED

    def _process(self, data, output: memoryview, op: Operation) -> ProcessResult:
        try:
            return self._engine.process(data, output, op)
        except EngineError as exc:
            self._poison(exc)
            raise

    def _stalled(self) -> None:
        exc = EngineError("Engine made no progress after the end of input")
        self._poison(exc)
        raise exc

    def _pull(self) -> bytes:
        try:
            return self._inner.read(self._buffer_size)
        except Exception as exc:
            self._poison(exc)
            raise

    def _push(self, data: bytes) -> None:
        view = memoryview(data)
        try:
            while view:
                n = self._inner.write(view)
                # file objects without a return value wrote everything
                if n is None:
                    n = len(view)
                if n == 0:
                    raise OSError("Underlying stream accepted no bytes")
                view = view[n:]
        except Exception as exc:
            self._poison(exc)
            raise

    def _flush_inner(self) -> None:
        flush = getattr(self._inner, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except Exception as exc:
            self._poison(exc)
            raise

    def _release(self) -> None:
        """Hook run by close() while the engine is still attached."""

    def close(self) -> None:
        """
        Release the engine. The wrapped source or sink is left open.
        """
        if self._closed:
            return
        try:
            if self._error is None:
                self._release()
        finally:
            self._closed = True
            self._engine = None
