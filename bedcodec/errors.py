"""Exceptions raised when a BED line cannot be decoded.

Exception hierarchy:
    FormatError (base, also a `ValueError`)
    ├── TokenCountError (not enough columns on a record line)
    ├── FieldFormatError (a single column has the wrong syntax)
    └── BlockGroupInconsistencyError (thick range or block columns incomplete)

"""


class FormatError(ValueError):
    """A line could not be decoded as a BED record.

    Attributes:
        line (`str`): The offending line, without its line terminator.
        reason (`str`): A human-readable description of the problem.

    """

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(line, reason)
        self.line = line
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.reason}: {self.line!r}"


class TokenCountError(FormatError):
    """The line has fewer columns than a record needs."""


class FieldFormatError(FormatError):
    """A column could not be parsed into its expected type.
    """


class BlockGroupInconsistencyError(FormatError):
    """The thick range or block columns are only partially present.

    Also raised when the block count disagrees with the number of block
    sizes or block starts.
    """
