"""Exception types raised while building the alignment model

All errors derive from ValueError, so callers that already guard record
processing with ``except ValueError`` keep working.
"""


class AlignBlocksError(ValueError):
    """Base class for alignment-model errors"""


class MalformedFormatError(AlignBlocksError):
    """CIGAR text could not be parsed; no block model can be built"""


class UnsupportedTagRepresentationError(AlignBlocksError):
    """A tag is present but encoded in a shape the decoder does not accept

    Attributes:
        tag: Two-letter tag key (None when not known at raise time)
    """

    def __init__(self, message: str, tag: str | None = None):
        super().__init__(message)
        self.tag = tag


class PartialBlockConstructionError(AlignBlocksError):
    """A single block or insertion could not be materialized

    Raised by block construction and caught by the assembler, which drops the
    offending token's block and carries on with the rest of the CIGAR.
    """
