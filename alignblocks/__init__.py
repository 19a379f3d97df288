"""
alignblocks: expand SAM/BAM alignment records into render-ready block models

Each record's CIGAR, bases, qualities and tags are turned into an immutable
Alignment holding aligned blocks, insertions, gap types, mate geometry, pair
orientation and per-end strands, plus optional flow-signal context and
reduced-read counts.

Example usage:
    >>> from alignblocks import Preferences, build_alignment, open_bam_safe
    >>> from alignblocks import iter_records, read_groups_from_header
    >>> with open_bam_safe("reads.bam") as bam:
    ...     read_groups = read_groups_from_header(bam.header)
    ...     for record in iter_records(bam, "chr1:1000-2000"):
    ...         aln = build_alignment(
    ...             record,
    ...             preferences=Preferences(show_soft_clipped=True),
    ...             read_groups=read_groups,
    ...         )
    ...         print(aln.pair_orientation, [b.start for b in aln.blocks])
"""

__version__ = "0.1.0"

from .alignment import Alignment, build_alignment
from .batch import build_alignments
from .blocks import (
    AlignmentBlock,
    BlockModel,
    assemble_blocks,
    build_block,
    read_sequence_from_blocks,
)
from .cigar import CigarLayout, CigarOperator, layout_cigar, parse_cigar
from .config import ChromosomeAliases, Preferences
from .constants import CigarOp, GapType, Strand
from .errors import (
    AlignBlocksError,
    MalformedFormatError,
    PartialBlockConstructionError,
    UnsupportedTagRepresentationError,
)
from .flow import (
    FlowSignalContext,
    FlowSignalContextBuilder,
    build_flow_context_builder,
    prepare_flow_signals,
)
from .pairing import ReadMate, pair_orientation, pair_strands
from .record import AlignmentRecord, ReadGroup
from .reduced import decode_reduced_counts
from .tags import TagArray, TagArrayKind, normalize_tag_array
from .utils import (
    iter_records,
    open_bam_safe,
    read_groups_from_header,
    record_from_segment,
)

__all__ = [
    "__version__",
    # Model
    "Alignment",
    "AlignmentBlock",
    "BlockModel",
    "ReadMate",
    "build_alignment",
    "build_alignments",
    # Components
    "CigarLayout",
    "CigarOperator",
    "FlowSignalContext",
    "FlowSignalContextBuilder",
    "TagArray",
    "TagArrayKind",
    "assemble_blocks",
    "build_block",
    "build_flow_context_builder",
    "decode_reduced_counts",
    "layout_cigar",
    "normalize_tag_array",
    "pair_orientation",
    "pair_strands",
    "parse_cigar",
    "prepare_flow_signals",
    "read_sequence_from_blocks",
    # Enums and configuration
    "ChromosomeAliases",
    "CigarOp",
    "GapType",
    "Preferences",
    "Strand",
    # Errors
    "AlignBlocksError",
    "MalformedFormatError",
    "PartialBlockConstructionError",
    "UnsupportedTagRepresentationError",
    # Records and I/O
    "AlignmentRecord",
    "ReadGroup",
    "iter_records",
    "open_bam_safe",
    "read_groups_from_header",
    "record_from_segment",
]
