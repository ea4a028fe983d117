import typing

from .errors import BlockGroupInconsistencyError, FieldFormatError
from .model import Exon, Strand


def _split_list(line: str, token: str, column: str) -> typing.List[int]:
    items = token.split(",")
    # trailing comma, as written by the UCSC tools
    if items and not items[-1].strip():
        items.pop()
    try:
        return [int(item) for item in items]
    except ValueError:
        raise FieldFormatError(line, f"invalid {column} {token!r}") from None


def build_exons(
    line: str,
    start: int,
    strand: Strand,
    thick_start: int,
    thick_end: int,
    block_count: str,
    block_sizes: str,
    block_starts: str,
) -> typing.Tuple[Exon, ...]:
    """Resolve the block columns of a record into exons.

    Block starts are relative to the feature start, which must already be
    converted to 1-based coordinates, as must `thick_start`. Exons are
    returned in the order the blocks are listed, which producers write in
    genomic order; the ordering is not checked.

    Raises:
        `BlockGroupInconsistencyError`: When the block count is not a
            positive integer, or when it disagrees with the number of
            block sizes or block starts.
        `FieldFormatError`: When a block size or start is not an integer.

    """
    try:
        count = int(block_count)
    except ValueError:
        count = 0
    if count <= 0:
        raise BlockGroupInconsistencyError(
            line, f"block count must be a positive integer, got {block_count!r}"
        )

    sizes = _split_list(line, block_sizes, "block sizes")
    starts = _split_list(line, block_starts, "block starts")
    if len(sizes) != count or len(starts) != count:
        raise BlockGroupInconsistencyError(
            line,
            f"expected {count} blocks, found {len(sizes)} sizes "
            f"and {len(starts)} starts",
        )

    exons = []
    for i, (size, offset) in enumerate(zip(sizes, starts)):
        exon_start = start + offset
        exon_end = exon_start + size - 1
        number = count - i if strand is Strand.NEGATIVE else i + 1
        exons.append(
            Exon(
                start=exon_start,
                end=exon_end,
                number=number,
                cd_start=max(exon_start, thick_start),
                cd_end=min(exon_end, thick_end),
            )
        )
    return tuple(exons)
