"""
Writers: accept bytes from the caller and push transformed bytes to a sink.

Closing a writer finishes its stream, so the usual way to use one is as a
context manager:

>>> import io
>>> from brotlistream import CompressorWriter
>>> sink = io.BytesIO()
>>> with CompressorWriter(sink) as writer:
...     writer.write(b"some bytes here")
15
"""

import logging
from typing import Optional

from ._adapter import DEFAULT_BUFFER_SIZE, State, StreamAdapter
from .engine import Engine, Operation, Status
from .errors import EngineError
from .options import DecodeOptions, EncodeOptions

logger = logging.getLogger(__name__)


class _StreamWriter(StreamAdapter):
    def __init__(self, sink, engine: Engine, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(sink, engine, buffer_size)
        self._scratch = memoryview(bytearray(buffer_size))

    def writable(self) -> bool:
        return True

    def _feed(self, data, op: Operation) -> Status:
        pos = 0
        while True:
            result = self._process(data[pos:], self._scratch, op)
            pos += result.consumed
            if result.written:
                self._push(bytes(self._scratch[: result.written]))
            if result.status is Status.HAS_MORE_OUTPUT:
                continue
            if pos < len(data):
                if result.status is Status.DONE:
                    exc = EngineError(
                        f"Engine finished with {len(data) - pos} bytes left unconsumed"
                    )
                    self._poison(exc)
                    raise exc
                continue
            if op is Operation.FINISH and result.status is not Status.DONE:
                if not result.consumed and not result.written:
                    self._stalled()
                continue
            return result.status

    def write(self, b) -> int:
        """
        Feed all of `b` to the engine, writing whatever it produces to the sink.

        Returns len(b) in bytes; nothing happens for an empty `b`.
        """
        self._check_usable()
        with memoryview(b) as view, view.cast("B") as data:
            if not data:
                return 0
            self._check_active("write")
            self._feed(data, Operation.PROCESS)
            self._state = State.ACTIVE
            return len(data)

    def flush(self) -> None:
        """
        Push everything derivable from the data written so far to the sink,
        then flush the sink. The stream stays open for more writes.
        """
        self._check_usable()
        if self._state is State.ACTIVE:
            self._feed(b"", Operation.FLUSH)
            self._state = State.FLUSHED
        self._flush_inner()

    def finish(self) -> None:
        """
        End the stream: write any trailing bytes and flush the sink.

        Calling it again is a no-op.
        """
        self._check_usable()
        if self._state is State.FINISHED:
            return
        self._feed(b"", Operation.FINISH)
        self._state = State.FINISHED
        logger.debug("%s finished", type(self).__name__)
        self._flush_inner()

    def _release(self) -> None:
        self.finish()

    def detach(self):
        """
        Finish the stream and give back the wrapped sink.

        The writer is closed afterwards.
        """
        self.finish()
        sink = self._inner
        self.close()
        return sink


class CompressorWriter(_StreamWriter):
    """
    Compresses everything written to it into a byte sink.

    Parameters
    ----------
    sink: object with a `write(b)` method
        Receives the brotli stream. `flush()` is called on it when present.
    options: EncodeOptions, optional
        Encoder parameters, defaults to `EncodeOptions()`.
    engine: Engine, optional
        Use this engine instead of building one from `options`.
    buffer_size: int
        Size of the scratch buffer handed to the engine, which is also the
        largest single write made to `sink`.
    """

    def __init__(
        self,
        sink,
        options: Optional[EncodeOptions] = None,
        *,
        engine: Optional[Engine] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if engine is None:
            engine = (options or EncodeOptions()).build()
        elif options is not None:
            raise TypeError("Pass either options or engine, not both")
        super().__init__(sink, engine, buffer_size)


class DecompressorWriter(_StreamWriter):
    """
    Decompresses a brotli stream written to it into a byte sink.

    `finish()` (or closing) fails with `DecompressionError` when the data
    written so far does not form a complete brotli stream.

    Parameters
    ----------
    sink: object with a `write(b)` method
        Receives the decompressed bytes. `flush()` is called on it when present.
    options: DecodeOptions, optional
        Decoder parameters, defaults to `DecodeOptions()`.
    engine: Engine, optional
        Use this engine instead of building one from `options`.
    buffer_size: int
        Size of the scratch buffer handed to the engine, which is also the
        largest single write made to `sink`.
    """

    def __init__(
        self,
        sink,
        options: Optional[DecodeOptions] = None,
        *,
        engine: Optional[Engine] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if engine is None:
            engine = (options or DecodeOptions()).build()
        elif options is not None:
            raise TypeError("Pass either options or engine, not both")
        super().__init__(sink, engine, buffer_size)
