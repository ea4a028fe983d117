import typing

import pandas

from .model import BEDFeature, FullBEDFeature, SimpleFeature

_COLUMNS = [
    "contig",
    "start",
    "end",
    "name",
    "score",
    "strand",
    "thick_start",
    "thick_end",
    "color",
    "exon_count",
    "coding_length",
]


def to_dataframe(features: typing.Iterable[SimpleFeature]) -> pandas.DataFrame:
    """Flatten features into a table, with one row per feature.

    Columns a feature does not have are left missing, so features of
    different BED flavours can be mixed. Coordinates are kept 1-based.
    """
    rows = []
    for feature in features:
        row = dict(contig=feature.contig, start=feature.start, end=feature.end)
        if isinstance(feature, BEDFeature):
            row.update(
                name=feature.name,
                score=feature.score,
                strand=feature.strand.value,
                color=None if feature.color is None else feature.color.to_hex(),
            )
        if isinstance(feature, FullBEDFeature):
            row.update(
                thick_start=feature.thick_start,
                thick_end=feature.thick_end,
                exon_count=len(feature.exons),
                coding_length=feature.coding_length,
            )
        rows.append(row)

    table = pandas.DataFrame(rows, columns=_COLUMNS)
    for column in ("start", "end", "thick_start", "thick_end", "exon_count", "coding_length"):
        table[column] = table[column].astype("Int64")
    return table
