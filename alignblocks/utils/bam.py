"""BAM file utilities for alignblocks

Adapters between pysam and the record types consumed by the model builder,
plus small sequence and region helpers.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pysam

from ..constants import NO_CIGAR
from ..record import AlignmentRecord, ReadGroup

_COMPLEMENT = str.maketrans("ACGTNacgtn", "TGCANtgcan")


def complement_base(base: str) -> str:
    """Complement of a single base; anything but ACGT maps to N"""
    if len(base) != 1 or base.upper() not in "ACGT":
        return "N"
    return base.translate(_COMPLEMENT)


def reverse_complement(seq: str) -> str:
    """
    Return the reverse complement of a DNA sequence.

    Args:
        seq: DNA sequence string (A, C, G, T, N)

    Returns:
        Reverse complement sequence; bases other than ACGTN become N
    """
    return "".join(complement_base(base) for base in reversed(seq))


def parse_region(region_str: str) -> tuple[str | None, int | None, int | None]:
    """Parse a genomic region string into components

    Supports formats:
    - "chr1" (entire chromosome)
    - "chr1:1000" (single position)
    - "chr1:1000-2000" (range)
    - "chr1:1,000-2,000" (with commas)

    Args:
        region_str: Region string to parse

    Returns:
        (chromosome, start, end) with 1-based inclusive coordinates, where
        start/end are None if not specified.
        Returns (None, None, None) if parsing fails

    Examples:
        >>> parse_region("chr1")
        ('chr1', None, None)
        >>> parse_region("chr1:1,000-2,000")
        ('chr1', 1000, 2000)
    """
    if not region_str or not region_str.strip():
        return None, None, None

    region_str = region_str.strip().replace(",", "")

    if ":" not in region_str:
        return region_str, None, None

    parts = region_str.split(":")
    if len(parts) != 2 or not parts[0].strip():
        return None, None, None

    chrom = parts[0].strip()
    coords = parts[1].strip()

    try:
        if "-" in coords:
            coord_parts = coords.split("-")
            if len(coord_parts) != 2:
                return None, None, None
            start = int(coord_parts[0].strip())
            end = int(coord_parts[1].strip())
        else:
            start = end = int(coords)
    except ValueError:
        return None, None, None

    if start < 1 or end < start:
        return None, None, None
    return chrom, start, end


@contextmanager
def open_bam_safe(bam_path: str | Path):
    """
    Context manager for safely opening and closing BAM files

    Args:
        bam_path: Path to BAM/SAM/CRAM file (string or Path object)

    Yields:
        pysam.AlignmentFile: Opened alignment file handle

    Raises:
        FileNotFoundError: If the file doesn't exist

    Examples:
        >>> with open_bam_safe("alignments.bam") as bam:
        ...     read_groups = read_groups_from_header(bam.header)
    """
    bam_path = Path(bam_path)

    if not bam_path.exists():
        raise FileNotFoundError(f"BAM file not found: {bam_path}")

    bam = None
    try:
        # Open with check_sq=False to accept unaligned BAMs without SQ headers
        bam = pysam.AlignmentFile(str(bam_path), check_sq=False)
        yield bam
    finally:
        if bam is not None:
            bam.close()


def read_groups_from_header(header) -> dict[str, ReadGroup]:
    """Collect @RG header lines into ReadGroup objects keyed by ID

    Args:
        header: pysam.AlignmentHeader (or anything with to_dict())

    Returns:
        Dict mapping read-group ID to ReadGroup
    """
    read_groups = {}
    for entry in header.to_dict().get("RG", []):
        rg_id = entry.get("ID")
        if rg_id is None:
            continue
        read_groups[rg_id] = ReadGroup(
            id=rg_id,
            sample=entry.get("SM"),
            library=entry.get("LB"),
            flow_order=entry.get("FO"),
            key_sequence=entry.get("KS"),
        )
    return read_groups


def record_from_segment(segment: pysam.AlignedSegment) -> AlignmentRecord:
    """Convert a pysam AlignedSegment into an AlignmentRecord

    pysam reports 0-based half-open reference coordinates; the record carries
    SAM's 1-based inclusive ones, with 0 standing for "not available".

    Args:
        segment: pysam AlignedSegment

    Returns:
        AlignmentRecord with all tags copied
    """
    reference_start = segment.reference_start
    alignment_start = reference_start + 1 if reference_start >= 0 else 0
    alignment_end = segment.reference_end if segment.reference_end is not None else 0

    qualities = segment.query_qualities
    mate_start = segment.next_reference_start

    return AlignmentRecord(
        read_name=segment.query_name or "",
        reference_name=segment.reference_name,
        alignment_start=alignment_start,
        alignment_end=alignment_end,
        cigar=segment.cigarstring or NO_CIGAR,
        read_bases=segment.query_sequence or "",
        base_qualities=bytes(qualities) if qualities is not None else None,
        mapping_quality=segment.mapping_quality,
        inferred_insert_size=segment.template_length,
        flag=segment.flag,
        mate_reference_name=segment.next_reference_name,
        mate_alignment_start=mate_start + 1 if mate_start >= 0 else 0,
        tags=dict(segment.get_tags()),
    )


def iter_records(
    bam: pysam.AlignmentFile, region: str | None = None
) -> Iterator[AlignmentRecord]:
    """Iterate over the records of an open alignment file

    Args:
        bam: Open pysam.AlignmentFile
        region: Optional region string (see parse_region); requires an index

    Yields:
        AlignmentRecord for each alignment, in file order

    Raises:
        ValueError: If the region string cannot be parsed
    """
    if region:
        chrom, start, end = parse_region(region)
        if chrom is None:
            raise ValueError(f"Invalid region format: {region}")
        fetch_start = start - 1 if start is not None else None
        alignments = bam.fetch(chrom, fetch_start, end)
    else:
        alignments = bam.fetch(until_eof=True)

    for segment in alignments:
        yield record_from_segment(segment)
