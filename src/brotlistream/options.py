"""
Encoder and decoder parameters.

Ranges mirror the limits of the Brotli reference encoder; every field that is
set is checked against them when the options object is created, so a bad value
never reaches an engine.
"""

import enum
import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import brotli

from .engine import BrotliDecoder, BrotliEncoder
from .errors import CompressionError, ConfigError

logger = logging.getLogger(__name__)


class ParameterValues(NamedTuple):
    default: Optional[int]
    min: int
    max: int


quality_values = ParameterValues(11, 0, 11)
window_size_values = ParameterValues(22, 10, 24)
# None: the encoder picks the block size from the quality
block_size_values = ParameterValues(None, 16, 24)

_VALUES = {
    "quality": quality_values,
    "window_size": window_size_values,
    "window_size_hint": window_size_values,
    "block_size": block_size_values,
}


def bounds(field: str) -> Tuple[int, int]:
    """Return lower and upper bounds of an option, both inclusive."""
    try:
        values = _VALUES[field]
    except KeyError:
        raise KeyError(f"Unknown option: {field!r}") from None
    return values.min, values.max


def _check(field: str, value: Optional[int]) -> None:
    if value is None:
        return
    lo, hi = bounds(field)
    # bool is an int subclass, but True is never a meaningful window size
    if isinstance(value, bool) or not isinstance(value, int) or not lo <= value <= hi:
        raise ConfigError(field, value, (lo, hi))


class Mode(enum.IntEnum):
    """Hint about the kind of data being compressed."""

    GENERIC = brotli.MODE_GENERIC
    TEXT = brotli.MODE_TEXT
    FONT = brotli.MODE_FONT


@dataclass(frozen=True)
class EncodeOptions:
    """
    Parameters of one compression session.

    Parameters
    ----------
    mode: Mode
        Tune the encoder for generic data, UTF-8 text or WOFF 2.0 fonts.
    quality: int, optional
        Speed vs. density tradeoff, 0 to 11. Unset means 11.
    window_size: int, optional
        Base 2 logarithm of the sliding window, 10 to 24. Unset means 22.
    block_size: int, optional
        Base 2 logarithm of the maximum input block, 16 to 24.
        Unset lets the encoder choose from the quality.
    """

    mode: Mode = Mode.GENERIC
    quality: Optional[int] = None
    window_size: Optional[int] = None
    block_size: Optional[int] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "mode", Mode(self.mode))
        except ValueError:
            raise ConfigError(
                "mode", self.mode, (min(Mode).value, max(Mode).value)
            ) from None
        _check("quality", self.quality)
        _check("window_size", self.window_size)
        _check("block_size", self.block_size)

    @classmethod
    def best(cls) -> "EncodeOptions":
        return cls(
            quality=quality_values.max,
            window_size=window_size_values.max,
            block_size=block_size_values.max,
        )

    @classmethod
    def worst(cls) -> "EncodeOptions":
        return cls(
            quality=quality_values.min,
            window_size=window_size_values.min,
            block_size=block_size_values.min,
        )

    @classmethod
    def default(cls) -> "EncodeOptions":
        return cls()

    def build(self) -> BrotliEncoder:
        """Create a fresh encoder configured with these options."""
        kwargs = {"mode": int(self.mode)}
        if self.quality is not None:
            kwargs["quality"] = self.quality
        if self.window_size is not None:
            kwargs["lgwin"] = self.window_size
        if self.block_size is not None:
            kwargs["lgblock"] = self.block_size
        try:
            compressor = brotli.Compressor(**kwargs)
        except brotli.error as exc:
            # ranges were checked already, so the engine disagrees with us
            raise CompressionError(f"Encoder rejected {self!r}") from exc
        logger.debug("Built encoder %r", self)
        return BrotliEncoder(compressor)


@dataclass(frozen=True)
class DecodeOptions:
    """
    Parameters of one decompression session.

    Parameters
    ----------
    window_size_hint: int, optional
        Expected base 2 logarithm of the stream's window, 10 to 24. Only
        range-checked: it has no effect on decoding, the decoder always uses
        the window declared in the stream header.
    """

    window_size_hint: Optional[int] = None

    def __post_init__(self):
        _check("window_size_hint", self.window_size_hint)

    @classmethod
    def best(cls) -> "DecodeOptions":
        return cls(window_size_hint=window_size_values.max)

    @classmethod
    def worst(cls) -> "DecodeOptions":
        return cls(window_size_hint=window_size_values.min)

    @classmethod
    def default(cls) -> "DecodeOptions":
        return cls()

    def build(self, stop_at_end: bool = False) -> BrotliDecoder:
        """
        Create a fresh decoder.

        With `stop_at_end` the decoder leaves bytes following the end of the
        stream unconsumed; otherwise it rejects them.
        """
        logger.debug("Built decoder %r", self)
        return BrotliDecoder(brotli.Decompressor(), stop_at_end=stop_at_end)
