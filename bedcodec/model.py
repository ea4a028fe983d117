import enum
import typing
from dataclasses import dataclass


class Strand(enum.Enum):
    """The orientation of a feature on its contig."""

    POSITIVE = "+"
    NEGATIVE = "-"
    NONE = "."


class Color(typing.NamedTuple):
    """An RGB display color, each component in the 0-255 range."""

    red: int = 0
    green: int = 0
    blue: int = 0

    def to_hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self)


@dataclass(frozen=True)
class Exon:
    """A single block of a multi-part feature.

    Attributes:
        start (`int`): Start coordinate on the contig (1-based).
        end (`int`): End coordinate on the contig (1-based, inclusive).
        number (`int`): Position of the exon in transcript order, counted
            from the 5' end, so exons of a feature on the negative strand
            are numbered in reverse genomic order.
        cd_start (`int`): Start of the exon clipped to the thick range.
        cd_end (`int`): End of the exon clipped to the thick range. Lower
            than `cd_start` when the exon is entirely non-coding.

    """

    start: int
    end: int
    number: int
    cd_start: int
    cd_end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def coding_length(self) -> int:
        return max(0, self.cd_end - self.cd_start + 1)


@dataclass(frozen=True)
class SimpleFeature:
    """A located interval, in 1-based closed coordinates.

    Attributes:
        contig (`str`): The name of the sequence the feature lies on.
        start (`int`): Start coordinate (1-based).
        end (`int`): End coordinate (1-based, inclusive).

    """

    contig: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class BEDFeature(SimpleFeature):
    """A feature with the optional display columns of a BED record.

    Attributes:
        name (`str`, optional): The feature name, if the column was given.
        score (`float`, optional): The feature score, or `None` when the
            column was absent.
        strand (`Strand`): The feature strand, `Strand.NONE` when absent.
        color (`Color`, optional): The display color, or `None` when unset.

    """

    name: typing.Optional[str] = None
    score: typing.Optional[float] = None
    strand: Strand = Strand.NONE
    color: typing.Optional[Color] = None


@dataclass(frozen=True)
class FullBEDFeature(BEDFeature):
    """A BED feature with its thick range and exon structure.

    Attributes:
        thick_start (`int`): Start of the thick (coding) range (1-based).
        thick_end (`int`): End of the thick range (1-based, inclusive).
        exons (`tuple` of `Exon`): The blocks of the feature, in genomic
            order.

    """

    thick_start: int = 0
    thick_end: int = 0
    exons: typing.Tuple[Exon, ...] = ()

    @property
    def coding_length(self) -> int:
        return sum(exon.coding_length for exon in self.exons)
