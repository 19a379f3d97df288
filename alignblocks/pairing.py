"""Mate geometry, pair orientation and per-end strand resolution

These only look at record flags and mate fields; they never touch the block
model.
"""

from dataclasses import dataclass

from .config import NameResolver, resolve_name
from .constants import Strand
from .record import AlignmentRecord


@dataclass(frozen=True)
class ReadMate:
    """The other end of a read pair

    Attributes:
        chromosome: Canonical mate reference name
        start: 0-based mate alignment start
        is_negative_strand: Mate reverse-strand flag
        is_mapped: Whether the mate is mapped
    """

    chromosome: str | None
    start: int
    is_negative_strand: bool
    is_mapped: bool

    @property
    def strand(self) -> Strand:
        return Strand.NEGATIVE if self.is_negative_strand else Strand.POSITIVE


def read_strand(record: AlignmentRecord) -> Strand:
    """Strand of the record itself"""
    return Strand.NEGATIVE if record.is_reverse else Strand.POSITIVE


def mate_from_record(
    record: AlignmentRecord, name_resolver: NameResolver | None = None
) -> ReadMate | None:
    """Build the ReadMate of a paired record, or None if the record is unpaired"""
    if not record.is_paired:
        return None
    return ReadMate(
        chromosome=resolve_name(record.mate_reference_name, name_resolver),
        start=record.mate_alignment_start - 1,
        is_negative_strand=record.is_mate_reverse,
        is_mapped=not record.is_mate_unmapped,
    )


def pair_orientation(record: AlignmentRecord) -> str:
    """Four-character pair orientation, e.g. "F1R2"

    Strand letter (F/R) and end label (1/2) of the 5'-most end followed by
    those of the other end. Only defined for paired records with both ends
    mapped to the same reference; empty string otherwise.

    When the aligner recorded no insert size, it is estimated by projecting
    the mate's end from its start using this read's reference length, which
    matches an Illumina -> <- library.

    Examples:
        A first-of-pair forward read at 100-149 whose reverse mate starts at
        300 yields "F1R2".
    """
    if not (
        record.is_paired
        and not record.is_unmapped
        and not record.is_mate_unmapped
        and record.reference_name == record.mate_reference_name
    ):
        return ""

    s1 = "R" if record.is_reverse else "F"
    s2 = "R" if record.is_mate_reverse else "F"
    if record.is_first_of_pair:
        o1, o2 = "1", "2"
    elif record.is_second_of_pair:
        o1, o2 = "2", "1"
    else:
        o1 = o2 = " "

    insert_size = record.inferred_insert_size
    if insert_size == 0:
        read_length = record.alignment_end - record.alignment_start + 1
        if record.alignment_start < record.mate_alignment_start:
            mate_end = record.mate_alignment_start + read_length
        else:
            mate_end = record.mate_alignment_start - read_length
        insert_size = mate_end - record.alignment_start

    if insert_size > 0:
        return f"{s1}{o1}{s2}{o2}"
    return f"{s2}{o2}{s1}{o1}"


def pair_strands(
    record: AlignmentRecord, mate: ReadMate | None = None
) -> tuple[Strand, Strand]:
    """Strands of the first-of-pair and second-of-pair ends

    Used for strand-specific libraries to recover the strand of the
    originating fragment. The second-of-pair strand is taken from the mate
    only for proper pairs, while the first-of-pair strand is taken from any
    mapped mate.

    Args:
        record: Alignment record
        mate: Mate of a paired record (built from the record if omitted)

    Returns:
        (first_of_pair_strand, second_of_pair_strand), Strand.NONE where
        undefined
    """
    own = read_strand(record)
    if not record.is_paired:
        # An unpaired read is its own first end
        return own, Strand.NONE

    if mate is None:
        mate = mate_from_record(record)

    if record.is_first_of_pair:
        first = own
    elif mate is not None and mate.is_mapped:
        first = mate.strand
    else:
        first = Strand.NONE

    if record.is_second_of_pair:
        second = own
    elif mate is not None and mate.is_mapped and record.is_proper_pair:
        second = mate.strand
    else:
        second = Strand.NONE

    return first, second
