"""CIGAR tokenization and block-layout sizing

parse_cigar() turns CIGAR text into (length, operator) pairs, dropping hard
clips. layout_cigar() does the same walk and also counts what the block
assembler will emit: match-like blocks, insertions, gap seams and the length
of a leading soft clip.
"""

from dataclasses import dataclass
from typing import NamedTuple

from .constants import (
    MATCH_OPS,
    NO_CIGAR,
    REFERENCE_CONSUMING_OPS,
    CigarOp,
)
from .errors import MalformedFormatError

_OPS_BY_CHAR = {op.value: op for op in CigarOp}


class CigarOperator(NamedTuple):
    """One CIGAR token"""

    length: int
    op: CigarOp


@dataclass(frozen=True)
class CigarLayout:
    """Tokenized CIGAR plus the counts needed to lay out blocks

    Attributes:
        operators: Tokens in CIGAR order, hard clips removed
        n_blocks: Number of match-like tokens (soft clips included if shown)
        n_insertions: Number of insertion tokens
        n_gaps: Number of seams: one per adjacent match-like pair, deletion,
            skipped region, insertion and padding
        leading_soft_clip: Length of a soft clip that is the first token
    """

    operators: tuple[CigarOperator, ...]
    n_blocks: int
    n_insertions: int
    n_gaps: int
    leading_soft_clip: int

    @property
    def trailing_soft_clip(self) -> int:
        if self.operators and self.operators[-1].op is CigarOp.SOFT_CLIP:
            return self.operators[-1].length
        return 0


def is_match_like(op: CigarOp | None, show_soft_clipped: bool) -> bool:
    """Return True if ``op`` produces an alignment block under the clip policy"""
    return op in MATCH_OPS or (show_soft_clipped and op is CigarOp.SOFT_CLIP)


def _tokenize(cigar: str) -> list[tuple[int, CigarOp]]:
    if not cigar:
        raise MalformedFormatError("Empty CIGAR string")

    tokens = []
    digits_start = 0
    for i, char in enumerate(cigar):
        if char.isdigit():
            continue
        op = _OPS_BY_CHAR.get(char)
        if op is None:
            raise MalformedFormatError(
                f"Invalid character '{char}' at position {i} in CIGAR '{cigar}'"
            )
        length_text = cigar[digits_start:i]
        if not length_text or not length_text.isascii():
            raise MalformedFormatError(
                f"Missing length for operator '{char}' at position {i} "
                f"in CIGAR '{cigar}'"
            )
        tokens.append((int(length_text), op))
        digits_start = i + 1

    if digits_start != len(cigar):
        raise MalformedFormatError(
            f"CIGAR '{cigar}' ends with a length but no operator"
        )
    return tokens


def parse_cigar(cigar: str) -> list[CigarOperator]:
    """Tokenize CIGAR text, dropping hard clips

    Args:
        cigar: CIGAR text, e.g. "8M2I4M1D5M"

    Returns:
        List of CigarOperator in CIGAR order; empty for "*"

    Raises:
        MalformedFormatError: If the text is empty or not valid CIGAR grammar

    Examples:
        >>> parse_cigar("5H3M")
        [CigarOperator(length=3, op=<CigarOp.MATCH: 'M'>)]
    """
    if cigar == NO_CIGAR:
        return []
    return [
        CigarOperator(length, op)
        for length, op in _tokenize(cigar)
        if op is not CigarOp.HARD_CLIP
    ]


def layout_cigar(cigar: str, show_soft_clipped: bool) -> CigarLayout:
    """Tokenize CIGAR text and count blocks, insertions and gap seams

    Hard clips are invisible to the counting: an M on either side of an H is
    still adjacent to the other. A soft clip only counts as the leading clip
    when it is the first token after any hard clips.

    Args:
        cigar: CIGAR text
        show_soft_clipped: Whether soft clips become blocks

    Raises:
        MalformedFormatError: If the text is not valid CIGAR grammar
    """
    operators = parse_cigar(cigar)

    n_blocks = n_insertions = n_gaps = 0
    prev_op = None
    for operator in operators:
        op = operator.op
        if is_match_like(op, show_soft_clipped):
            if is_match_like(prev_op, show_soft_clipped):
                n_gaps += 1
            n_blocks += 1
        elif op in (CigarOp.DELETION, CigarOp.SKIPPED_REGION, CigarOp.PADDING):
            n_gaps += 1
        elif op is CigarOp.INSERTION:
            n_insertions += 1
            n_gaps += 1
        prev_op = op

    leading = 0
    if operators and operators[0].op is CigarOp.SOFT_CLIP:
        leading = operators[0].length

    return CigarLayout(
        operators=tuple(operators),
        n_blocks=n_blocks,
        n_insertions=n_insertions,
        n_gaps=n_gaps,
        leading_soft_clip=leading,
    )


def reference_length(operators) -> int:
    """Number of reference bases spanned by M/=/X/D/N tokens"""
    return sum(o.length for o in operators if o.op in REFERENCE_CONSUMING_OPS)


def query_length(operators) -> int:
    """Number of stored read bases covered by M/=/X/I/S tokens"""
    return sum(
        o.length
        for o in operators
        if o.op in MATCH_OPS or o.op in (CigarOp.INSERTION, CigarOp.SOFT_CLIP)
    )
