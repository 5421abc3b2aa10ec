"""
Readers: pull from a byte source and hand back transformed bytes.

>>> import io
>>> from brotlistream import CompressorReader, DecompressorReader
>>> compressed = CompressorReader(io.BytesIO(b"some bytes here")).read()
>>> DecompressorReader(io.BytesIO(compressed)).read()
b'some bytes here'
"""

from typing import Optional

from ._adapter import DEFAULT_BUFFER_SIZE, State, StreamAdapter
from .engine import Engine, Operation, Status
from .errors import StreamStateError
from .options import DecodeOptions, EncodeOptions


class _StreamReader(StreamAdapter):
    def __init__(self, source, engine: Engine, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(source, engine, buffer_size)
        self._input = b""
        self._pos = 0
        self._eof = False
        self._has_more = False

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        """
        Read up to len(b) bytes into `b`, returning the number of bytes read.

        Returns as soon as any bytes are available; 0 only once the stream
        has ended (or for an empty `b`).
        """
        self._check_usable()
        with memoryview(b) as view, view.cast("B") as out:
            if not out or self._state is State.FINISHED:
                return 0
            while True:
                if self._pos == len(self._input) and not (self._eof or self._has_more):
                    self._input = self._pull()
                    self._pos = 0
                    if not self._input:
                        # an empty pull ends the input for good; never poll again
                        self._eof = True
                op = Operation.FINISH if self._eof else Operation.PROCESS
                with memoryview(self._input) as pending:
                    result = self._process(pending[self._pos:], out, op)
                self._pos += result.consumed
                self._has_more = result.status is Status.HAS_MORE_OUTPUT
                if result.status is Status.DONE:
                    self._state = State.FINISHED
                    return result.written
                if result.written:
                    return result.written
                if (
                    self._eof
                    and result.status is Status.NEEDS_MORE_INPUT
                    and not result.consumed
                ):
                    self._stalled()

    @property
    def unused_data(self) -> bytes:
        """
        Bytes pulled from the source that follow the end of the stream.

        Empty until the stream has ended.
        """
        if self._state is not State.FINISHED or self._error is not None:
            return b""
        return bytes(self._input[self._pos:])

    def detach(self):
        """
        Give back the wrapped source once the whole stream has been read.

        The reader is closed afterwards. Bytes it had already pulled past the
        end of the stream stay available as `unused_data`.
        """
        self._check_usable()
        if self._state is not State.FINISHED:
            raise StreamStateError(
                "Cannot detach before the end of the stream was read", self._state.value
            )
        source = self._inner
        self.close()
        return source


class CompressorReader(_StreamReader):
    """
    Reads a byte source and compresses it while reading.

    Parameters
    ----------
    source: object with a `read(n)` method
        Plain data to compress; `read` returning b"" marks its end.
    options: EncodeOptions, optional
        Encoder parameters, defaults to `EncodeOptions()`.
    engine: Engine, optional
        Use this engine instead of building one from `options`.
    buffer_size: int
        How many bytes to request from `source` at a time.
    """

    def __init__(
        self,
        source,
        options: Optional[EncodeOptions] = None,
        *,
        engine: Optional[Engine] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if engine is None:
            engine = (options or EncodeOptions()).build()
        elif options is not None:
            raise TypeError("Pass either options or engine, not both")
        super().__init__(source, engine, buffer_size)


class DecompressorReader(_StreamReader):
    """
    Reads a brotli compressed byte source and decompresses it while reading.

    Parameters
    ----------
    source: object with a `read(n)` method
        Compressed data; `read` returning b"" marks its end. Reading stops at
        the end of the brotli stream: nothing more is requested from `source`
        and bytes already pulled past the end are kept in `unused_data`.
    options: DecodeOptions, optional
        Decoder parameters, defaults to `DecodeOptions()`.
    engine: Engine, optional
        Use this engine instead of building one from `options`.
    buffer_size: int
        How many bytes to request from `source` at a time.
    """

    def __init__(
        self,
        source,
        options: Optional[DecodeOptions] = None,
        *,
        engine: Optional[Engine] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if engine is None:
            engine = (options or DecodeOptions()).build(stop_at_end=True)
        elif options is not None:
            raise TypeError("Pass either options or engine, not both")
        super().__init__(source, engine, buffer_size)
