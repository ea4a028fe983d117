"""Decoding of BED genomic interval files.
"""

from .codec import BEDCodec, StartOffset, TabixFormat, tokenize
from .errors import (
    BlockGroupInconsistencyError,
    FieldFormatError,
    FormatError,
    TokenCountError,
)
from .model import BEDFeature, Color, Exon, FullBEDFeature, SimpleFeature, Strand
from .reader import FeatureReader, LineReader

__version__ = "0.1.0"

__all__ = [
    "BEDCodec",
    "BEDFeature",
    "BlockGroupInconsistencyError",
    "Color",
    "Exon",
    "FeatureReader",
    "FieldFormatError",
    "FormatError",
    "FullBEDFeature",
    "LineReader",
    "SimpleFeature",
    "StartOffset",
    "Strand",
    "TabixFormat",
    "TokenCountError",
    "tokenize",
]
