"""Alignment block assembly

Expands a tokenized CIGAR and the read's bases, qualities, reduced counts and
flow contexts into the render-ready geometry of one record:

- blocks: contiguous match/mismatch runs (plus soft clips when shown), in
  reference order
- insertions: read bases with no reference advance, placed at the reference
  offset where they occur
- gap_types: one GapType per seam between consecutive blocks

Three cursors move through the CIGAR: the reference position of the next
block, the offset into the read arrays, and the output lists themselves.
"""

from dataclasses import dataclass

import numpy as np

from .cigar import CigarLayout, is_match_like, layout_cigar
from .constants import (
    NO_CIGAR,
    NO_QUALITY,
    NO_SEQUENCE_BASE,
    UNKNOWN_BASE,
    CigarOp,
    GapType,
)
from .errors import PartialBlockConstructionError
from .flow import FlowSignalContext, FlowSignalContextBuilder
from .logging_config import get_logger

logger = get_logger(__name__)


def _read_only(values: np.ndarray) -> np.ndarray:
    values.flags.writeable = False
    return values


@dataclass(frozen=True, eq=False)
class AlignmentBlock:
    """Contiguous run of read bases anchored at one reference offset

    Used both for aligned blocks and for insertions.

    Attributes:
        start: 0-based reference offset of the first base
        bases: Block bases (sentinel-filled when the read lacks them)
        qualities: Read-only uint8 Phred qualities, one per base
        counts: Read-only int16 reduced-read counts, or None
        flow_contexts: One FlowSignalContext (or None) per base, or None when
            the read has no flow signals
        is_soft_clipped: Whether the block comes from a soft clip
    """

    start: int
    bases: str
    qualities: np.ndarray
    counts: np.ndarray | None = None
    flow_contexts: tuple[FlowSignalContext | None, ...] | None = None
    is_soft_clipped: bool = False

    def __len__(self) -> int:
        return len(self.bases)

    @property
    def end(self) -> int:
        """0-based exclusive reference end"""
        return self.start + len(self.bases)

    @property
    def has_counts(self) -> bool:
        return self.counts is not None

    @property
    def has_flow_signals(self) -> bool:
        return self.flow_contexts is not None

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end

    def base_at(self, position: int) -> str:
        """Base aligned to a 0-based reference position inside the block"""
        if not self.contains(position):
            raise IndexError(
                f"Position {position} outside block [{self.start}, {self.end})"
            )
        return self.bases[position - self.start]

    def quality_at(self, position: int) -> int:
        if not self.contains(position):
            raise IndexError(
                f"Position {position} outside block [{self.start}, {self.end})"
            )
        return int(self.qualities[position - self.start])

    def __repr__(self) -> str:
        clip = ", soft-clipped" if self.is_soft_clipped else ""
        return f"<AlignmentBlock {self.start}-{self.end} {self.bases!r}{clip}>"


@dataclass(frozen=True)
class BlockModel:
    """Output of assemble_blocks()

    Attributes:
        blocks: Alignment blocks in reference order
        insertions: Insertion blocks in CIGAR order
        gap_types: One entry per seam, in CIGAR order
        start: Displayed start, moved left over a shown leading soft clip
        end_extension: Length of a shown trailing soft clip, to be added to
            the alignment end
    """

    blocks: tuple[AlignmentBlock, ...]
    insertions: tuple[AlignmentBlock, ...]
    gap_types: tuple[GapType, ...]
    start: int
    end_extension: int = 0


def _as_quality_array(qualities) -> np.ndarray | None:
    if qualities is None:
        return None
    if isinstance(qualities, (bytes, bytearray)):
        return np.frombuffer(qualities, dtype=np.uint8)
    return np.asarray(qualities, dtype=np.uint8)


def build_block(
    read_bases: str,
    qualities: np.ndarray | None,
    start: int,
    from_idx: int,
    n_bases: int,
    *,
    counts: np.ndarray | None = None,
    flow_builder: FlowSignalContextBuilder | None = None,
    is_soft_clipped: bool = False,
) -> AlignmentBlock:
    """Materialize the block for read slice ``[from_idx, from_idx + n_bases)``

    Missing data never raises: a read without bases yields NO_SEQUENCE_BASE,
    a read too short for the slice yields UNKNOWN_BASE, and missing or short
    qualities yield NO_QUALITY. Reduced counts are optional, but when present
    they must cover the slice.

    Args:
        read_bases: Stored read bases
        qualities: Stored qualities (uint8 array) or None
        start: 0-based reference offset of the block
        from_idx: Offset into the read arrays
        n_bases: Block length
        counts: Decoded reduced-read counts, if any
        flow_builder: Flow context source, if any
        is_soft_clipped: Mark the block as coming from a soft clip

    Raises:
        PartialBlockConstructionError: If the slice is negative or the
            reduced counts do not cover it
    """
    if from_idx < 0 or n_bases < 0:
        raise PartialBlockConstructionError(
            f"Invalid read slice [{from_idx}, {from_idx + n_bases})"
        )
    to_idx = from_idx + n_bases

    if not read_bases:
        bases = NO_SEQUENCE_BASE * n_bases
    elif len(read_bases) < to_idx:
        bases = UNKNOWN_BASE * n_bases
    else:
        bases = read_bases[from_idx:to_idx]

    if qualities is None or len(qualities) == 0 or len(qualities) < to_idx:
        block_qualities = np.full(n_bases, NO_QUALITY, dtype=np.uint8)
    else:
        block_qualities = np.array(qualities[from_idx:to_idx], dtype=np.uint8)

    block_counts = None
    if counts is not None:
        if len(counts) < to_idx:
            raise PartialBlockConstructionError(
                f"Reduced counts cover {len(counts)} bases, block needs "
                f"[{from_idx}, {to_idx})"
            )
        block_counts = _read_only(np.array(counts[from_idx:to_idx], dtype=np.int16))

    flow_contexts = None
    if flow_builder is not None:
        flow_contexts = flow_builder.context_for(from_idx, n_bases)

    return AlignmentBlock(
        start=start,
        bases=bases,
        qualities=_read_only(block_qualities),
        counts=block_counts,
        flow_contexts=flow_contexts,
        is_soft_clipped=is_soft_clipped,
    )


def assemble_blocks(
    cigar: str,
    read_bases: str,
    qualities,
    start: int,
    *,
    show_soft_clipped: bool = False,
    counts: np.ndarray | None = None,
    flow_builder: FlowSignalContextBuilder | None = None,
) -> BlockModel:
    """Build blocks, insertions and gap types for one record

    Args:
        cigar: CIGAR text, or "*" for an ungapped single block
        read_bases: Stored read bases ("" when absent)
        qualities: Stored qualities (bytes, array or None)
        start: 0-based alignment start
        show_soft_clipped: Turn soft clips into blocks and widen start/end
        counts: Decoded reduced-read counts, if any
        flow_builder: Flow context source, if any

    Returns:
        BlockModel for the record

    Raises:
        MalformedFormatError: If the CIGAR text cannot be parsed

    Examples:
        >>> model = assemble_blocks("3M1I2M2D2M", "ACGTACGT", None, 100)
        >>> [(b.start, b.bases) for b in model.blocks]
        [(100, 'ACG'), (103, 'AC'), (107, 'GT')]
        >>> [g.value for g in model.gap_types]
        ['O', 'D']
    """
    quality_array = _as_quality_array(qualities)

    if cigar == NO_CIGAR:
        block = build_block(read_bases, quality_array, start, 0, len(read_bases))
        return BlockModel(blocks=(block,), insertions=(), gap_types=(), start=start)

    layout = layout_cigar(cigar, show_soft_clipped)
    return _assemble_layout(
        layout,
        read_bases,
        quality_array,
        start,
        show_soft_clipped=show_soft_clipped,
        counts=counts,
        flow_builder=flow_builder,
    )


def _assemble_layout(
    layout: CigarLayout,
    read_bases: str,
    qualities: np.ndarray | None,
    start: int,
    *,
    show_soft_clipped: bool,
    counts: np.ndarray | None,
    flow_builder: FlowSignalContextBuilder | None,
) -> BlockModel:
    blocks: list[AlignmentBlock] = []
    insertions: list[AlignmentBlock] = []
    gap_types: list[GapType] = []

    if show_soft_clipped:
        start -= layout.leading_soft_clip
        from_idx = 0
    else:
        from_idx = layout.leading_soft_clip
    block_start = start

    prev_op = None
    for operator in layout.operators:
        op, length = operator.op, operator.length

        if is_match_like(op, show_soft_clipped):
            if is_match_like(prev_op, show_soft_clipped):
                gap_types.append(GapType.ZERO_GAP)
            try:
                blocks.append(
                    build_block(
                        read_bases,
                        qualities,
                        block_start,
                        from_idx,
                        length,
                        counts=counts,
                        flow_builder=flow_builder,
                        is_soft_clipped=op is CigarOp.SOFT_CLIP,
                    )
                )
            except PartialBlockConstructionError as e:
                logger.error(
                    "Error processing CIGAR token %d%s: %s", length, op.value, e
                )
            from_idx += length
            block_start += length

        elif op in (CigarOp.DELETION, CigarOp.SKIPPED_REGION):
            block_start += length
            gap_types.append(GapType(op.value))

        elif op is CigarOp.INSERTION:
            # Zero-length seam where the insertion splits the blocks
            gap_types.append(GapType.ZERO_GAP)
            try:
                insertions.append(
                    build_block(
                        read_bases,
                        qualities,
                        block_start,
                        from_idx,
                        length,
                        counts=counts,
                        flow_builder=flow_builder,
                    )
                )
            except PartialBlockConstructionError as e:
                logger.error(
                    "Error processing CIGAR token %d%s: %s", length, op.value, e
                )
            from_idx += length

        elif op is CigarOp.PADDING:
            # Deletion against the padded reference, which is not available
            gap_types.append(GapType.ZERO_GAP)

        prev_op = op

    end_extension = layout.trailing_soft_clip if show_soft_clipped else 0

    return BlockModel(
        blocks=tuple(blocks),
        insertions=tuple(insertions),
        gap_types=tuple(gap_types),
        start=start,
        end_extension=end_extension,
    )


def read_sequence_from_blocks(blocks) -> str:
    """Concatenate block bases

    Hard-clipped bases (and hidden soft clips) have no block, so the result
    only matches the stored sequence for reads without them.
    """
    return "".join(block.bases for block in blocks)
