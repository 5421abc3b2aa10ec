"""
Whole-buffer helpers built on the stream adapters.
"""

import io
from typing import Optional

from .errors import CompressionError, DecompressionError
from .options import DecodeOptions, EncodeOptions, _check
from .writer import CompressorWriter, DecompressorWriter


class _BoundedSink:
    """Writes into a caller supplied buffer, failing once it is full."""

    def __init__(self, output, error):
        self._view = memoryview(output).cast("B")
        self._error = error
        self.pos = 0

    def write(self, b) -> int:
        n = len(b)
        if self.pos + n > len(self._view):
            raise self._error(
                f"Output buffer of {len(self._view)} bytes is too small"
            )
        self._view[self.pos:self.pos + n] = b
        self.pos += n
        return n


def compress(data, options: Optional[EncodeOptions] = None) -> bytes:
    """
    Brotli compression.

    >>> brotlistream.compress(b'some bytes here', EncodeOptions(quality=9))
    """
    sink = io.BytesIO()
    with CompressorWriter(sink, options) as writer:
        writer.write(data)
    return sink.getvalue()


def decompress(data, options: Optional[DecodeOptions] = None) -> bytes:
    """
    Brotli decompression.

    `data` must hold exactly one brotli stream; trailing bytes are an error.

    >>> brotlistream.decompress(compressed_bytes)
    """
    sink = io.BytesIO()
    with DecompressorWriter(sink, options) as writer:
        writer.write(data)
    return sink.getvalue()


def compress_into(data, output, options: Optional[EncodeOptions] = None) -> int:
    """
    Compress directly into an output buffer, returning the number of bytes written.

    Raises CompressionError if `output` cannot hold the compressed stream;
    `compress_bound` gives a size that is always large enough.
    """
    sink = _BoundedSink(output, CompressionError)
    with CompressorWriter(sink, options) as writer:
        writer.write(data)
    return sink.pos


def decompress_into(data, output, options: Optional[DecodeOptions] = None) -> int:
    """
    Decompress directly into an output buffer, returning the number of bytes written.

    Raises DecompressionError if `output` is too small or `data` is not a
    complete brotli stream.
    """
    sink = _BoundedSink(output, DecompressionError)
    with DecompressorWriter(sink, options) as writer:
        writer.write(data)
    return sink.pos


def compress_bound(input_size: int, quality: Optional[int] = None) -> Optional[int]:
    """
    Upper bound of the compressed size of `input_size` bytes.

    Only defined for qualities of 2 and above (the default is 11); returns
    None otherwise. Raises ConfigError for a quality outside 0 to 11.
    """
    _check("quality", quality)
    if input_size < 0:
        raise ValueError(f"input_size must not be negative, got {input_size}")
    if quality is not None and quality < 2:
        return None
    if input_size == 0:
        return 2
    # window bits + empty metadata, per 16 KiB block header, last empty block
    num_large_blocks = input_size >> 14
    overhead = 2 + (4 * num_large_blocks) + 3 + 1
    return input_size + overhead
