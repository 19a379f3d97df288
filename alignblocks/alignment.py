"""Render-ready model of a single alignment record

build_alignment() is the one construction path: it takes a decoded record
plus the injected collaborators (preferences snapshot, chromosome-name
resolver, read-group table) and returns a fully populated, read-only
Alignment. Nothing in the model is shared between records.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .blocks import AlignmentBlock, assemble_blocks, read_sequence_from_blocks
from .config import NameResolver, Preferences, resolve_name
from .constants import READ_GROUP_TAG, TEMPLATE_ORIENTATION_KEY, GapType, Strand
from .flow import build_flow_context_builder
from .logging_config import get_logger
from .pairing import (
    ReadMate,
    mate_from_record,
    pair_orientation,
    pair_strands,
    read_strand,
)
from .record import AlignmentRecord, ReadGroup
from .reduced import reduced_counts_from_tags

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Alignment:
    """Block model and pair metadata of one alignment record

    Coordinates are 0-based half-open. ``start``/``end`` are the displayed
    extent (widened over soft clips when they are shown); ``alignment_start``
    and ``alignment_end`` are the aligned extent from the record.
    Models compare and hash by identity.

    Attributes:
        record: Source record, kept for tag lookup
        chromosome: Canonical reference name
        start: Displayed start
        end: Displayed end
        alignment_start: Aligned start
        alignment_end: Aligned end
        read_name: Read name with surrounding whitespace removed
        blocks: Aligned blocks in reference order
        insertions: Insertion blocks
        gap_types: One GapType per seam between blocks
        mate: Mate of a paired read, None when unpaired
        pair_orientation: e.g. "F1R2", empty when undefined
        first_of_pair_strand: Strand of the first-of-pair end
        second_of_pair_strand: Strand of the second-of-pair end
        read_group: Read-group ID from the RG tag
        sample: Read-group sample (SM)
        library: Read-group library (LB)
    """

    record: AlignmentRecord
    chromosome: str | None
    start: int
    end: int
    alignment_start: int
    alignment_end: int
    read_name: str
    blocks: tuple[AlignmentBlock, ...]
    insertions: tuple[AlignmentBlock, ...]
    gap_types: tuple[GapType, ...]
    mate: ReadMate | None
    pair_orientation: str
    first_of_pair_strand: Strand
    second_of_pair_strand: Strand
    read_group: str | None = None
    sample: str | None = None
    library: str | None = None

    def __repr__(self) -> str:
        return (
            f"<Alignment {self.read_name} {self.chromosome}:"
            f"{self.start}-{self.end} {self.cigar} ({len(self.blocks)} blocks)>"
        )

    # Record passthroughs

    @property
    def cigar(self) -> str:
        return self.record.cigar

    @property
    def mapping_quality(self) -> int:
        return self.record.mapping_quality

    @property
    def inferred_insert_size(self) -> int:
        return self.record.inferred_insert_size

    @property
    def read_sequence(self) -> str:
        return self.record.read_bases

    @property
    def read_length(self) -> int:
        return len(self.record.read_bases)

    # Flags

    @property
    def is_negative_strand(self) -> bool:
        return self.record.is_reverse

    @property
    def read_strand(self) -> Strand:
        return read_strand(self.record)

    @property
    def is_mapped(self) -> bool:
        return not self.record.is_unmapped

    @property
    def is_paired(self) -> bool:
        return self.record.is_paired

    @property
    def is_proper_pair(self) -> bool:
        return self.record.is_paired and self.record.is_proper_pair

    @property
    def is_first_of_pair(self) -> bool:
        return self.record.is_paired and self.record.is_first_of_pair

    @property
    def is_second_of_pair(self) -> bool:
        return self.record.is_paired and self.record.is_second_of_pair

    @property
    def is_duplicate(self) -> bool:
        return self.record.is_duplicate

    @property
    def is_primary(self) -> bool:
        return not self.record.is_secondary

    @property
    def is_supplementary(self) -> bool:
        return self.record.is_supplementary

    @property
    def is_vendor_failed(self) -> bool:
        return self.record.is_qc_fail

    # Derived views

    def get_attribute(self, key: str) -> Any:
        """Tag value for two-letter keys; pair orientation for TEMPLATE_ORIENTATION"""
        if len(key) == 2:
            return self.record.get_tag(key)
        if key == TEMPLATE_ORIENTATION_KEY:
            return self.pair_orientation
        return None

    def read_sequence_from_blocks(self) -> str:
        """Read bases recovered from the blocks (no insertions or hidden clips)"""
        return read_sequence_from_blocks(self.blocks)

    def block_at(self, position: int) -> AlignmentBlock | None:
        """Block covering a 0-based reference position, if any"""
        for block in self.blocks:
            if block.contains(position):
                return block
        return None


def build_alignment(
    record: AlignmentRecord,
    *,
    preferences: Preferences | None = None,
    name_resolver: NameResolver | None = None,
    read_groups: Mapping[str, ReadGroup] | None = None,
) -> Alignment:
    """Build the Alignment model for one record

    Args:
        record: Decoded alignment record
        preferences: Display preferences snapshot (defaults: soft clips hidden)
        name_resolver: Chromosome-name canonicalization; raw names if None
        read_groups: Read-group header table keyed by ID, for sample/library
            and flow-space parameters

    Returns:
        Fully populated Alignment

    Raises:
        MalformedFormatError: If the record's CIGAR cannot be parsed
    """
    if preferences is None:
        preferences = Preferences()

    # SAM is 1-based inclusive; the model is 0-based half-open
    alignment_start = record.alignment_start - 1
    alignment_end = max(alignment_start, record.alignment_end)

    read_group_id = record.get_tag(READ_GROUP_TAG)
    read_group = None
    if read_group_id is not None and read_groups:
        read_group = read_groups.get(read_group_id)

    model = assemble_blocks(
        record.cigar,
        record.read_bases,
        record.base_qualities,
        alignment_start,
        show_soft_clipped=preferences.show_soft_clipped,
        counts=reduced_counts_from_tags(record.tags),
        flow_builder=build_flow_context_builder(record, read_group),
    )

    mate = mate_from_record(record, name_resolver)
    first_strand, second_strand = pair_strands(record, mate)

    return Alignment(
        record=record,
        chromosome=resolve_name(record.reference_name, name_resolver),
        start=model.start,
        end=alignment_end + model.end_extension,
        alignment_start=alignment_start,
        alignment_end=alignment_end,
        read_name=record.read_name.strip(),
        blocks=model.blocks,
        insertions=model.insertions,
        gap_types=model.gap_types,
        mate=mate,
        pair_orientation=pair_orientation(record),
        first_of_pair_strand=first_strand,
        second_of_pair_strand=second_strand,
        read_group=read_group_id,
        sample=read_group.sample if read_group else None,
        library=read_group.library if read_group else None,
    )
