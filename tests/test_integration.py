"""
Interop with the other brotli implementations and buffer types around.
"""

import io

import brotli
import cramjam
import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.extra import numpy as st_np

from brotlistream import (
    CompressorReader,
    CompressorWriter,
    DecompressorReader,
    DecompressorWriter,
    EncodeOptions,
    compress,
    decompress,
)

from .test_stream import same_same

raw_data = b"oh what a beautiful morning, oh what a beautiful day!!" * 10000


def test_cramjam_reads_our_stream():
    compressed = compress(raw_data)
    assert same_same(bytes(cramjam.brotli.decompress(compressed)), raw_data)


def test_we_read_cramjam_stream():
    compressed = bytes(cramjam.brotli.compress(raw_data))
    assert same_same(decompress(compressed), raw_data)


def test_we_read_brotli_streaming_output():
    compressor = brotli.Compressor(quality=4)
    compressed = b"".join(
        [
            compressor.process(raw_data[:1000]),
            compressor.flush(),
            compressor.process(raw_data[1000:]),
            compressor.finish(),
        ]
    )
    with DecompressorReader(io.BytesIO(compressed)) as reader:
        assert same_same(reader.read(), raw_data)


@pytest.mark.parametrize("Writer", (CompressorWriter, DecompressorWriter))
def test_cramjam_buffer_sink(Writer):
    data = raw_data if Writer is CompressorWriter else compress(raw_data)
    sink = cramjam.Buffer()
    with Writer(sink) as writer:
        writer.write(data)
    sink.seek(0)
    out = sink.read()
    if Writer is CompressorWriter:
        out = decompress(out)
    assert same_same(out, raw_data)


@pytest.mark.parametrize("Reader", (CompressorReader, DecompressorReader))
def test_cramjam_buffer_source(Reader):
    source = cramjam.Buffer()
    source.write(raw_data if Reader is CompressorReader else compress(raw_data))
    source.seek(0)
    with Reader(source, buffer_size=4096) as reader:
        out = reader.read()
    if Reader is CompressorReader:
        out = decompress(out)
    assert same_same(out, raw_data)


@given(
    arr=st_np.arrays(
        dtype=st_np.integer_dtypes(endianness="=") | st_np.floating_dtypes(endianness="="),
        shape=st_np.array_shapes(max_dims=3, max_side=16),
    )
)
def test_numpy_input(arr):
    sink = io.BytesIO()
    with CompressorWriter(sink, EncodeOptions(quality=4)) as writer:
        assert writer.write(arr) == arr.nbytes
    assert decompress(sink.getvalue()) == arr.tobytes()


def test_numpy_output():
    compressed = compress(raw_data)
    out = np.zeros(len(raw_data), dtype=np.uint8)
    with DecompressorReader(io.BytesIO(compressed)) as reader:
        n = 0
        while n < len(out):
            got = reader.readinto(out[n:])
            assert got
            n += got
        assert reader.read() == b""
    assert same_same(out.tobytes(), raw_data)


@given(data=st.binary())
def test_oneshot_agrees_with_brotli(data):
    assert brotli.decompress(compress(data)) == data
    assert decompress(brotli.compress(data)) == data
