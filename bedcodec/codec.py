"""Decoding of BED records.

BED lines hold 3 mandatory and 9 optional columns, each optional column
only meaningful when all the columns before it are present::

    contig start end [name [score [strand [thickStart thickEnd [color
    [blockCount blockSizes blockStarts]]]]]]

Coordinates are stored 0-based and half-open in the file, and converted
to 1-based closed coordinates by the codec.

See Also:
    The `BED format description <https://genome.ucsc.edu/FAQ/FAQformat.html#format1>`_
    from the UCSC Genome Browser FAQ.

"""

import enum
import math
import os
import re
import typing

from ._utils import strip_block_compressed_extension
from .errors import (
    BlockGroupInconsistencyError,
    FieldFormatError,
    FormatError,
    TokenCountError,
)
from .exons import build_exons
from .model import BEDFeature, Color, FullBEDFeature, SimpleFeature, Strand

if typing.TYPE_CHECKING:
    from .reader import LineReader


_WHITESPACE = re.compile(r"\s+")
_META_PREFIXES = ("#", "track", "browser")


def tokenize(line: str) -> typing.List[str]:
    """Split a line into stripped columns.

    Lines containing a tab are split on every tab, so empty columns are
    kept; other lines are split on runs of whitespace.
    """
    line = line.rstrip("\r\n")
    if "\t" in line:
        return [token.strip() for token in line.split("\t")]
    return _WHITESPACE.split(line.strip()) if line.strip() else []


def is_record_line(line: str) -> bool:
    """Check whether a line may hold a record, rather than metadata.
    """
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(_META_PREFIXES)


class StartOffset(enum.IntEnum):
    """The value added to the start column to get a 1-based coordinate."""

    ZERO = 0
    ONE = 1


class TabixFormat(enum.Enum):
    """Column presets used by tabix to index a tab-delimited format.

    Each value is a ``(flags, sequence_column, begin_column, end_column,
    meta_char, skip_lines)`` tuple, with 1-based column numbers and an end
    column of 0 when the format has no end column.
    """

    GFF = (0, 1, 4, 5, "#", 0)
    BED = (0x10000, 1, 2, 3, "#", 0)
    SAM = (1, 3, 4, 0, "@", 0)
    VCF = (2, 1, 2, 0, "#", 0)

    @property
    def flags(self) -> int:
        return self.value[0]

    @property
    def sequence_column(self) -> int:
        return self.value[1]

    @property
    def begin_column(self) -> int:
        return self.value[2]

    @property
    def end_column(self) -> int:
        return self.value[3]

    @property
    def meta_char(self) -> str:
        return self.value[4]

    @property
    def skip_lines(self) -> int:
        return self.value[5]

    @property
    def zero_based(self) -> bool:
        return bool(self.flags & 0x10000)


def _parse_int(line: str, token: str, column: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise FieldFormatError(line, f"invalid {column} {token!r}") from None


def _parse_score(line: str, token: str) -> float:
    try:
        score = float(token)
    except ValueError:
        raise FieldFormatError(line, f"invalid score {token!r}") from None
    if not math.isfinite(score):
        raise FieldFormatError(line, f"score is not finite: {token!r}")
    return score


def parse_strand(line: str, token: str) -> Strand:
    """Parse a strand column into a `Strand`.
    """
    try:
        return Strand(token)
    except ValueError:
        raise FieldFormatError(line, f"invalid strand {token!r}") from None


def parse_color(line: str, token: str) -> typing.Optional[Color]:
    """Parse an ``itemRgb`` column into a `Color`.

    An empty column leaves the color unset. Missing trailing components
    default to 0, so ``"0"`` is black.
    """
    if not token:
        return None
    components = token.split(",")
    if len(components) > 3:
        raise FieldFormatError(line, f"invalid color {token!r}")
    try:
        values = [int(x) for x in components]
    except ValueError:
        raise FieldFormatError(line, f"invalid color {token!r}") from None
    if any(not 0 <= x <= 255 for x in values):
        raise FieldFormatError(line, f"color component out of range in {token!r}")
    return Color(*values)


class BEDCodec:
    """A decoder for BED records.

    The codec is stateless once created, and can be shared between
    readers.

    Example:
        >>> codec = BEDCodec()
        >>> codec.decode("chr1\\t1\\t3")
        SimpleFeature(contig='chr1', start=2, end=3)

    """

    #: The file extension of BED files.
    extension = ".bed"

    def __init__(self, *, start_offset: StartOffset = StartOffset.ONE) -> None:
        """Create a new BED codec.

        Arguments:
            start_offset (`StartOffset`): The offset added to the start and
                thick start columns. Defaults to `StartOffset.ONE` for
                standard 0-based BED files; use `StartOffset.ZERO` for
                files already written with 1-based starts.

        """
        self.start_offset = StartOffset(start_offset)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(start_offset={self.start_offset!s})"

    @property
    def tabix_format(self) -> TabixFormat:
        return TabixFormat.BED

    def index_format_tag(self) -> TabixFormat:
        """Get the tabix preset for indexing BED files."""
        return TabixFormat.BED

    def can_decode(self, path: typing.Union[str, os.PathLike]) -> bool:
        """Check whether a file name designates a BED file.

        One block-compression suffix (see
        `~bedcodec._utils.BLOCK_COMPRESSED_EXTENSIONS`) is allowed after
        the ``.bed`` extension, nothing else.
        """
        return strip_block_compressed_extension(path).endswith(self.extension)

    def decode(self, line: str) -> SimpleFeature:
        """Decode a single BED line into a feature.

        Returns:
            `SimpleFeature`: The most specific feature type for the number
            of columns: a `SimpleFeature` for 2 or 3 columns, a
            `FullBEDFeature` when block columns are given, and a
            `BEDFeature` otherwise.

        Raises:
            `~bedcodec.errors.FormatError`: When the line is not a valid
                record. Metadata and blank lines are rejected too.

        """
        line = line.rstrip("\r\n")
        if not is_record_line(line):
            raise FormatError(line, "not a record line")

        tokens = tokenize(line)
        if len(tokens) < 2:
            raise TokenCountError(line, f"expected at least 2 columns, found {len(tokens)}")

        contig = tokens[0]
        if not contig:
            raise FieldFormatError(line, "empty contig name")
        start = _parse_int(line, tokens[1], "start") + self.start_offset
        end = _parse_int(line, tokens[2], "end") if len(tokens) > 2 else start
        if start < 1:
            raise FieldFormatError(line, f"start coordinate out of range: {tokens[1]!r}")
        # end == start - 1 is a zero-length interval, e.g. an insertion point
        if end < start - 1:
            raise FieldFormatError(line, f"end coordinate {end} lower than start {start}")
        if len(tokens) <= 3:
            return SimpleFeature(contig, start, end)

        name = tokens[3].replace('"', "")
        score = _parse_score(line, tokens[4]) if len(tokens) > 4 else None
        strand = parse_strand(line, tokens[5]) if len(tokens) > 5 else Strand.NONE

        if len(tokens) == 7:
            raise BlockGroupInconsistencyError(line, "thick start given without thick end")
        if len(tokens) > 7:
            thick_start = _parse_int(line, tokens[6], "thick start") + self.start_offset
            thick_end = _parse_int(line, tokens[7], "thick end")
        color = parse_color(line, tokens[8]) if len(tokens) > 8 else None

        if len(tokens) in (10, 11):
            raise BlockGroupInconsistencyError(
                line, "block count given without block sizes and block starts"
            )
        if len(tokens) < 12:
            return BEDFeature(contig, start, end, name, score, strand, color)

        exons = build_exons(
            line,
            start,
            strand,
            thick_start,
            thick_end,
            tokens[9],
            tokens[10],
            tokens[11],
        )
        return FullBEDFeature(
            contig,
            start,
            end,
            name,
            score,
            strand,
            color,
            thick_start=thick_start,
            thick_end=thick_end,
            exons=exons,
        )

    def detect_header_offset(self, source: "LineReader") -> int:
        """Skip the header of a BED stream and locate its first feature.

        Blank lines are consumed, and a first line that is not valid text
        counts as a header. The first non-blank line is peeked: if
        it decodes, it is left in the source and the position before it
        is returned; otherwise it is taken as a header, consumed and
        discarded, and the position after it is returned.

        Note:
            Header content is never returned, and only a single header
            line is skipped. A malformed first record is indistinguishable
            from a header and is dropped the same way.

        Returns:
            `int`: The position of the first feature, as reported by the
            source (a virtual offset for BGZF streams).

        """
        while True:
            try:
                line = source.peek()
            except FormatError:
                source.skip()
                return source.position
            if line is None or line.strip():
                break
            source.skip()
        if line is not None:
            try:
                self.decode(line)
            except FormatError:
                source.skip()
        return source.position
