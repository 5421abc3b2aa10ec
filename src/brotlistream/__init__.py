"""
Streaming brotli compression and decompression over any byte source or sink.

| Class                | Input        | Output       | Wraps          |
|----------------------|--------------|--------------|----------------|
| `CompressorReader`   | Uncompressed | Compressed   | `read(n)` obj  |
| `DecompressorReader` | Compressed   | Uncompressed | `read(n)` obj  |
| `CompressorWriter`   | Uncompressed | Compressed   | `write(b)` obj |
| `DecompressorWriter` | Compressed   | Uncompressed | `write(b)` obj |

To compress a file:

```python
>>> import shutil
>>> from brotlistream import CompressorWriter
>>> with open("test.txt", "rb") as src, open("test.txt.br", "wb") as dst:
...     with CompressorWriter(dst) as writer:
...         shutil.copyfileobj(src, writer)
```
"""

from .engine import Engine, Operation, ProcessResult, Status, BrotliDecoder, BrotliEncoder
from .errors import (
    BrotliStreamError,
    CompressionError,
    ConfigError,
    DecompressionError,
    EngineError,
    StreamStateError,
)
from .oneshot import compress, compress_bound, compress_into, decompress, decompress_into
from .options import (
    DecodeOptions,
    EncodeOptions,
    Mode,
    ParameterValues,
    block_size_values,
    bounds,
    quality_values,
    window_size_values,
)
from .reader import CompressorReader, DecompressorReader
from .writer import CompressorWriter, DecompressorWriter
from ._adapter import DEFAULT_BUFFER_SIZE

__version__ = "0.1.0"

__all__ = (
    "BrotliDecoder",
    "BrotliEncoder",
    "BrotliStreamError",
    "CompressionError",
    "CompressorReader",
    "CompressorWriter",
    "ConfigError",
    "DEFAULT_BUFFER_SIZE",
    "DecodeOptions",
    "DecompressionError",
    "DecompressorReader",
    "DecompressorWriter",
    "EncodeOptions",
    "Engine",
    "EngineError",
    "Mode",
    "Operation",
    "ParameterValues",
    "ProcessResult",
    "Status",
    "StreamStateError",
    "block_size_values",
    "bounds",
    "compress",
    "compress_bound",
    "compress_into",
    "decompress",
    "decompress_into",
    "quality_values",
    "window_size_values",
)
