"""
Command line interface: python -m brotlistream --help
"""

import enum
import logging
import shutil
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from ._adapter import DEFAULT_BUFFER_SIZE
from .errors import BrotliStreamError, ConfigError, DecompressionError
from .options import DecodeOptions, EncodeOptions, Mode
from .reader import DecompressorReader
from .writer import CompressorWriter

logger = logging.getLogger("brotlistream")

app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    help="Streaming brotli compression tool.",
)

# option names as typed on the command line
_FLAGS = {
    "quality": "--quality",
    "window_size": "--window",
    "window_size_hint": "--window",
    "block_size": "--block",
    "mode": "--mode",
}


class ModeName(str, enum.Enum):
    generic = "generic"
    text = "text"
    font = "font"


def _input_option():
    return typer.Option(
        None, "--input", exists=True, dir_okay=False, help="File to read, stdin when omitted."
    )


def _output_option():
    return typer.Option(
        None, "--output", dir_okay=False, help="File to write, stdout when omitted."
    )


def _buffer_size_option():
    return typer.Option(
        DEFAULT_BUFFER_SIZE, "--buffer-size", min=1, help="Bytes moved per read/write."
    )


def _version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version, is_eager=True, help="Show the version."
    ),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )


def _streams(stack: ExitStack, input: Optional[Path], output: Optional[Path]):
    src = stack.enter_context(open(input, "rb")) if input else sys.stdin.buffer
    dst = stack.enter_context(open(output, "wb")) if output else sys.stdout.buffer
    return src, dst


def _run(command: str, run) -> None:
    try:
        with ExitStack() as stack:
            run(stack)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint=_FLAGS.get(exc.field)) from exc
    except BrotliStreamError as exc:
        logger.error("%s failed: %s", command, exc)
        raise typer.Exit(code=1) from exc


@app.command()
def compress(
    input: Optional[Path] = _input_option(),
    output: Optional[Path] = _output_option(),
    quality: Optional[int] = typer.Option(None, help="0 to 11, defaults to 11."),
    window: Optional[int] = typer.Option(None, help="Log2 of the window, 10 to 24."),
    block: Optional[int] = typer.Option(None, help="Log2 of the input block, 16 to 24."),
    mode: ModeName = typer.Option(ModeName.generic, help="Kind of data compressed."),
    buffer_size: int = _buffer_size_option(),
):
    """
    Compress input into a brotli stream.
    """

    def run(stack: ExitStack) -> None:
        options = EncodeOptions(
            mode=Mode[mode.value.upper()],
            quality=quality,
            window_size=window,
            block_size=block,
        )
        src, dst = _streams(stack, input, output)
        with CompressorWriter(dst, options, buffer_size=buffer_size) as writer:
            shutil.copyfileobj(src, writer, buffer_size)
        dst.flush()

    _run("compress", run)


@app.command()
def decompress(
    input: Optional[Path] = _input_option(),
    output: Optional[Path] = _output_option(),
    window: Optional[int] = typer.Option(None, help="Expected log2 of the window."),
    buffer_size: int = _buffer_size_option(),
):
    """
    Decompress a brotli stream.
    """

    def run(stack: ExitStack) -> None:
        options = DecodeOptions(window_size_hint=window)
        src, dst = _streams(stack, input, output)
        with DecompressorReader(src, options, buffer_size=buffer_size) as reader:
            shutil.copyfileobj(reader, dst, buffer_size)
            if reader.unused_data or src.read(1):
                raise DecompressionError("Unexpected data after the end of the brotli stream")
        dst.flush()

    _run("decompress", run)


if __name__ == "__main__":
    app(prog_name="brotlistream")
