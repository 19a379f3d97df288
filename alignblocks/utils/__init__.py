"""Utility functions for alignblocks

Submodules:
- bam: pysam adapters, BAM opening and region parsing, sequence helpers
"""

from .bam import (
    complement_base,
    iter_records,
    open_bam_safe,
    parse_region,
    read_groups_from_header,
    record_from_segment,
    reverse_complement,
)

__all__ = [
    "complement_base",
    "iter_records",
    "open_bam_safe",
    "parse_region",
    "read_groups_from_header",
    "record_from_segment",
    "reverse_complement",
]
