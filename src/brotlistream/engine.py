"""
Engine capability used by the stream adapters.

An engine turns input bytes into output bytes one step at a time. Each call
to `Engine.process` may consume any amount of the input it is given and fills
any amount of the output buffer it is given, then reports what the caller has
to do next through a `Status`. The adapters in `reader` and `writer` only talk
to this interface, which keeps them independent of the Brotli bindings.
"""

import abc
import enum
import logging
from typing import NamedTuple

import brotli

from .errors import CompressionError, DecompressionError, StreamStateError

logger = logging.getLogger(__name__)

# the encoder is fed whole blocks of this size, so its output does not depend
# on how callers chunk their input
ENCODER_BLOCK_SIZE = 1 << 16
# input is handed to the decompressor in slices of at most this size
DECODER_INPUT_SLICE = 1 << 13
# largest piece of output the look-ahead decompressor makes before discarding it
LOOKAHEAD_OUTPUT_LIMIT = 1 << 20


class Operation(enum.Enum):
    PROCESS = "process"
    FLUSH = "flush"
    FINISH = "finish"


class Status(enum.Enum):
    NEEDS_MORE_INPUT = "needs_more_input"
    HAS_MORE_OUTPUT = "has_more_output"
    DONE = "done"


class ProcessResult(NamedTuple):
    consumed: int
    written: int
    status: Status


class Engine(abc.ABC):
    """
    One compression or decompression session.

    Owned by exactly one adapter for its whole life.
    """

    @abc.abstractmethod
    def process(self, data, output: memoryview, op: Operation) -> ProcessResult:
        """
        Run one step of the transform.

        Parameters
        ----------
        data: anything implementing the buffer protocol
            Input; the first `consumed` bytes of it were taken.
        output: memoryview
            Writable byte buffer; the first `written` bytes of it were filled.
        op: Operation
            PROCESS to keep going, FLUSH to emit everything derivable so far,
            FINISH once there is no more input.

        Returns
        -------
        ProcessResult

        Raises
        ------
        EngineError
            The stream is malformed or the transform failed.
        """
        ...


class _StagedEngine(Engine):
    """Holds output the library produced but the caller has no room for yet."""

    def __init__(self):
        self._pending = memoryview(b"")

    def _stage(self, produced: bytes) -> None:
        if produced:
            self._pending = memoryview(produced)

    def _drain(self, output: memoryview) -> int:
        n = min(len(output), len(self._pending))
        if n:
            output[:n] = self._pending[:n]
            self._pending = self._pending[n:]
        return n

    @property
    def has_pending_output(self) -> bool:
        return len(self._pending) > 0


class BrotliEncoder(_StagedEngine):
    """Engine wrapping a `brotli.Compressor`."""

    def __init__(self, compressor: "brotli.Compressor", block_size: int = ENCODER_BLOCK_SIZE):
        super().__init__()
        self._compressor = compressor
        self._block_size = block_size
        self._block = bytearray()
        self._flushing = False
        self._finished = False

    @property
    def is_finished(self) -> bool:
        return self._finished and not self.has_pending_output

    def _call(self, method, *args) -> None:
        try:
            produced = method(*args)
        except brotli.error as exc:
            raise CompressionError(f"Brotli encoder failed: {exc}") from exc
        self._stage(produced)

    def _encode_block(self) -> None:
        block = bytes(self._block)
        self._block.clear()
        self._call(self._compressor.process, block)

    def process(self, data, output: memoryview, op: Operation) -> ProcessResult:
        written = self._drain(output)
        if self.has_pending_output:
            return ProcessResult(0, written, Status.HAS_MORE_OUTPUT)

        if self._finished:
            if op is not Operation.FINISH or len(data):
                raise StreamStateError(
                    f"Cannot {op.value} after the stream was finished", "finished"
                )
            return ProcessResult(0, written, Status.DONE)

        if self._flushing:
            # a flush issued earlier has now been drained completely
            self._flushing = False
            if op is Operation.FLUSH and not len(data):
                return ProcessResult(0, written, Status.NEEDS_MORE_INPUT)

        consumed = 0
        with memoryview(data) as view:
            while consumed < len(view):
                take = min(len(view) - consumed, self._block_size - len(self._block))
                self._block += view[consumed:consumed + take]
                consumed += take
                if len(self._block) == self._block_size:
                    self._encode_block()
                    written += self._drain(output[written:])
                    if self.has_pending_output:
                        return ProcessResult(consumed, written, Status.HAS_MORE_OUTPUT)

        if op is Operation.PROCESS:
            return ProcessResult(consumed, written, Status.NEEDS_MORE_INPUT)

        if self._block:
            self._encode_block()
            written += self._drain(output[written:])
            if self.has_pending_output:
                # the flush/finish itself still has to run; it will on re-entry
                return ProcessResult(consumed, written, Status.HAS_MORE_OUTPUT)

        if op is Operation.FLUSH:
            self._call(self._compressor.flush)
            self._flushing = True
        else:
            self._call(self._compressor.finish)
            self._finished = True
            logger.debug("Encoder finished")
        written += self._drain(output[written:])
        if self.has_pending_output:
            return ProcessResult(consumed, written, Status.HAS_MORE_OUTPUT)
        if self._finished:
            return ProcessResult(consumed, written, Status.DONE)
        self._flushing = False
        return ProcessResult(consumed, written, Status.NEEDS_MORE_INPUT)


class BrotliDecoder(Engine):
    """
    Engine wrapping a `brotli.Decompressor`.

    The decompressor is never asked for more output than the caller has room
    for, so a few bytes of input cannot inflate into a large backlog.

    With `stop_at_end`, bytes following the end of the brotli stream are left
    unconsumed instead of being rejected. The binding cannot tell how much of
    its input it used, so every slice is first run through a second
    decompressor. When that one fails, the slice holds the end of the stream
    (or is corrupt) and is fed one byte at a time, which stops exactly where
    the stream ends.
    """

    def __init__(
        self,
        decompressor: "brotli.Decompressor",
        input_slice: int = DECODER_INPUT_SLICE,
        stop_at_end: bool = False,
    ):
        self._decompressor = decompressor
        self._input_slice = input_slice
        self._stop_at_end = stop_at_end
        self._lookahead = brotli.Decompressor() if stop_at_end else None
        self._bytewise = False
        # the last call filled its output; the decompressor may hold more
        self._draining = False

    @property
    def is_finished(self) -> bool:
        return self._decompressor.is_finished()

    def _inflate(self, chunk: bytes, limit: int) -> bytes:
        try:
            return self._decompressor.process(chunk, limit)
        except brotli.error as exc:
            raise DecompressionError(f"Brotli decoder failed: {exc}") from exc

    def _look_ahead(self, chunk: bytes) -> None:
        lookahead = self._lookahead
        try:
            lookahead.process(chunk, LOOKAHEAD_OUTPUT_LIMIT)
            while not lookahead.can_accept_more_data():
                lookahead.process(b"", LOOKAHEAD_OUTPUT_LIMIT)
        except brotli.error:
            logger.debug("Stream ends inside the next %d bytes, feeding bytewise", len(chunk))
            self._lookahead = None
            self._bytewise = True

    def _next_chunk(self, view: memoryview) -> bytes:
        if self._bytewise:
            return bytes(view[:1])
        chunk = bytes(view[:self._input_slice])
        if self._lookahead is not None:
            self._look_ahead(chunk)
            if self._bytewise:
                return chunk[:1]
        return chunk

    def process(self, data, output: memoryview, op: Operation) -> ProcessResult:
        consumed = 0
        written = 0
        with memoryview(data) as view:
            total = len(view)
            while written < len(output) and not self.is_finished:
                if self._draining:
                    chunk = b""
                elif consumed < total:
                    chunk = self._next_chunk(view[consumed:])
                else:
                    break
                space = len(output) - written
                produced = self._inflate(chunk, space)
                consumed += len(chunk)
                output[written:written + len(produced)] = produced
                written += len(produced)
                self._draining = bool(produced) and (
                    len(produced) == space or not self._decompressor.can_accept_more_data()
                )

        if self.is_finished:
            if consumed < total and not self._stop_at_end:
                raise DecompressionError(
                    f"{total - consumed} bytes of unexpected data after "
                    "the end of the brotli stream"
                )
            return ProcessResult(consumed, written, Status.DONE)
        if self._draining:
            return ProcessResult(consumed, written, Status.HAS_MORE_OUTPUT)
        if op is Operation.FINISH and consumed == total:
            raise DecompressionError(
                "Brotli stream is truncated: input ended before the end of the stream"
            )
        return ProcessResult(consumed, written, Status.NEEDS_MORE_INPUT)
