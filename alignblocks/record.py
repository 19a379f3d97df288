"""Decoded alignment record consumed by the model builder

AlignmentRecord mirrors what a SAM/BAM reader hands over: 1-based inclusive
coordinates, CIGAR text, raw bases and qualities, the SAM flag word, mate
fields and a two-letter tag lookup. See utils.bam.record_from_segment() for
the pysam adapter.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    FLAG_DUPLICATE,
    FLAG_FIRST_OF_PAIR,
    FLAG_MATE_REVERSE,
    FLAG_MATE_UNMAPPED,
    FLAG_PAIRED,
    FLAG_PROPER_PAIR,
    FLAG_QC_FAIL,
    FLAG_REVERSE,
    FLAG_SECOND_OF_PAIR,
    FLAG_SECONDARY,
    FLAG_SUPPLEMENTARY,
    FLAG_UNMAPPED,
    NO_CIGAR,
)


@dataclass(frozen=True)
class ReadGroup:
    """Read-group header fields used by the model (@RG ID/SM/LB/FO/KS)"""

    id: str
    sample: str | None = None
    library: str | None = None
    flow_order: str | None = None
    key_sequence: str | None = None


@dataclass(frozen=True)
class AlignmentRecord:
    """Single alignment record as delivered by a record reader

    Attributes:
        read_name: Query template name
        reference_name: Reference sequence name (None or "*" if unplaced)
        alignment_start: 1-based leftmost mapped position (0 if unplaced)
        alignment_end: 1-based inclusive rightmost mapped position (0 if unplaced)
        cigar: CIGAR text, "*" when absent
        read_bases: Stored read sequence ("" when absent)
        base_qualities: Raw per-base Phred qualities (None when absent)
        mapping_quality: MAPQ
        inferred_insert_size: TLEN (0 when not recorded)
        flag: SAM flag word
        mate_reference_name: RNEXT, already expanded from "="
        mate_alignment_start: 1-based PNEXT (0 if unavailable)
        tags: Two-letter tag lookup
    """

    read_name: str
    reference_name: str | None
    alignment_start: int
    alignment_end: int
    cigar: str = NO_CIGAR
    read_bases: str = ""
    base_qualities: bytes | None = None
    mapping_quality: int = 0
    inferred_insert_size: int = 0
    flag: int = 0
    mate_reference_name: str | None = None
    mate_alignment_start: int = 0
    tags: Mapping[str, Any] = field(default_factory=dict)

    def _has(self, bit: int) -> bool:
        return bool(self.flag & bit)

    @property
    def is_paired(self) -> bool:
        return self._has(FLAG_PAIRED)

    @property
    def is_proper_pair(self) -> bool:
        return self._has(FLAG_PROPER_PAIR)

    @property
    def is_unmapped(self) -> bool:
        return self._has(FLAG_UNMAPPED)

    @property
    def is_mate_unmapped(self) -> bool:
        return self._has(FLAG_MATE_UNMAPPED)

    @property
    def is_reverse(self) -> bool:
        return self._has(FLAG_REVERSE)

    @property
    def is_mate_reverse(self) -> bool:
        return self._has(FLAG_MATE_REVERSE)

    @property
    def is_first_of_pair(self) -> bool:
        return self._has(FLAG_FIRST_OF_PAIR)

    @property
    def is_second_of_pair(self) -> bool:
        return self._has(FLAG_SECOND_OF_PAIR)

    @property
    def is_secondary(self) -> bool:
        return self._has(FLAG_SECONDARY)

    @property
    def is_qc_fail(self) -> bool:
        return self._has(FLAG_QC_FAIL)

    @property
    def is_duplicate(self) -> bool:
        return self._has(FLAG_DUPLICATE)

    @property
    def is_supplementary(self) -> bool:
        return self._has(FLAG_SUPPLEMENTARY)

    def get_tag(self, key: str, default: Any = None) -> Any:
        return self.tags.get(key, default)
