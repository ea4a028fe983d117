import contextlib
import pathlib
import typing

import rich.console
import rich.markup

from ._utils import zopen
from .codec import BEDCodec
from .errors import FieldFormatError, FormatError
from .model import SimpleFeature


class LineReader:
    """A line source reporting the position of the next unread line.

    Positions are whatever the wrapped handle returns from `tell`: a
    virtual offset for `Bio.bgzf.BgzfReader` handles, a byte offset
    otherwise. Callers should treat them as opaque values.
    """

    def __init__(self, handle: typing.BinaryIO, encoding: str = "utf-8") -> None:
        self.handle = handle
        self.encoding = encoding
        self._peeked: typing.Optional[typing.Tuple[int, bytes]] = None

    def __iter__(self) -> "LineReader":
        return self

    def __next__(self) -> str:
        line = self.readline()
        if line is None:
            raise StopIteration
        return line

    @property
    def position(self) -> int:
        if self._peeked is not None:
            return self._peeked[0]
        return self.handle.tell()

    def _fill(self) -> bool:
        if self._peeked is None:
            position = self.handle.tell()
            raw = self.handle.readline()
            if not raw:
                return False
            self._peeked = (position, raw)
        return True

    def peek(self) -> typing.Optional[str]:
        """Get the next line without consuming it, or `None` at EOF.

        Raises:
            `~bedcodec.errors.FieldFormatError`: When the line cannot be
                decoded with the reader encoding. The line stays pending
                until `skip` or `readline` is called.

        """
        if not self._fill():
            return None
        raw = self._peeked[1]
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as err:
            line = raw.decode(self.encoding, "replace").rstrip("\r\n")
            raise FieldFormatError(
                line, f"invalid {self.encoding} data at byte {err.start}"
            ) from None

    def readline(self) -> typing.Optional[str]:
        """Consume the next line, or return `None` at EOF.

        An undecodable line is consumed before the error is raised.
        """
        try:
            return self.peek()
        finally:
            self._peeked = None

    def skip(self) -> None:
        """Discard the next line without decoding it."""
        self._fill()
        self._peeked = None


class FeatureReader:
    """An iterator over the features of a BED file.

    Example:
        >>> with FeatureReader("tests/data/deletions.bed") as reader:
        ...     features = list(reader)

    """

    def __init__(
        self,
        path: typing.Union[str, pathlib.Path, typing.BinaryIO],
        codec: typing.Optional[BEDCodec] = None,
        *,
        skip_invalid: bool = False,
        console: typing.Optional[rich.console.Console] = None,
    ) -> None:
        """Open a BED file for reading.

        Arguments:
            path (`str`, `pathlib.Path` or file-like object): The file to
                read, optionally compressed.
            codec (`BEDCodec`, optional): The codec to decode lines with.
            skip_invalid (`bool`): Report and skip malformed lines instead
                of stopping at the first one. Defaults to `False`.
            console (`rich.console.Console`, optional): The console to
                report skipped lines to. Defaults to a quiet console.

        """
        self.path = path
        self.codec = BEDCodec() if codec is None else codec
        self.skip_invalid = skip_invalid
        self.console = rich.console.Console(quiet=True) if console is None else console
        self.skipped = 0

        self._ctx = contextlib.ExitStack()
        try:
            handle = self._ctx.enter_context(zopen(path))
            self.source = LineReader(handle)
            self.header_offset = self.codec.detect_header_offset(self.source)
        except BaseException:
            self._ctx.close()
            raise

    def __enter__(self) -> "FeatureReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.close()
        return False

    def __iter__(self) -> typing.Iterator[SimpleFeature]:
        while True:
            try:
                line = self.source.readline()
                if line is None:
                    break
                feature = self.codec.decode(line)
            except FormatError as err:
                if not self.skip_invalid:
                    raise
                self.skipped += 1
                self.console.print(
                    f"[bold yellow]{'Skipping':>12}[/] invalid record "
                    f"([bold cyan]{rich.markup.escape(err.reason)}[/])"
                )
                continue
            yield feature

    def close(self) -> None:
        self._ctx.close()
