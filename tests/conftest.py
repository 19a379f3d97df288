"""Pytest configuration and shared fixtures."""

import itertools

import pysam
import pytest

from alignblocks.cigar import parse_cigar, query_length, reference_length
from alignblocks.constants import (
    FLAG_FIRST_OF_PAIR,
    FLAG_MATE_REVERSE,
    FLAG_PAIRED,
    FLAG_PROPER_PAIR,
)
from alignblocks.record import AlignmentRecord


def bases_for(n: int) -> str:
    """Deterministic read sequence of length n"""
    return "".join(itertools.islice(itertools.cycle("ACGTTGCA"), n))


@pytest.fixture
def make_record():
    """Factory for AlignmentRecord objects with consistent coordinates.

    ``start`` is 1-based; the end is derived from the CIGAR. Bases and
    qualities default to a sequence matching the CIGAR's query length.
    """

    def _make(
        cigar: str = "10M",
        start: int = 101,
        bases: str | None = None,
        qualities: bytes | None = None,
        **kwargs,
    ) -> AlignmentRecord:
        operators = parse_cigar(cigar)
        if bases is None:
            bases = bases_for(query_length(operators))
        if qualities is None:
            qualities = bytes([30] * len(bases))
        kwargs.setdefault("read_name", "read_001")
        kwargs.setdefault("reference_name", "chr1")
        return AlignmentRecord(
            alignment_start=start,
            alignment_end=start + reference_length(operators) - 1,
            cigar=cigar,
            read_bases=bases,
            base_qualities=qualities,
            **kwargs,
        )

    return _make


@pytest.fixture
def proper_pair_flag():
    """Flag of a first-of-pair forward read in a proper pair with a reverse mate"""
    return FLAG_PAIRED | FLAG_PROPER_PAIR | FLAG_FIRST_OF_PAIR | FLAG_MATE_REVERSE


@pytest.fixture
def bam_header():
    """In-memory header with two references and a flow-space read group"""
    return pysam.AlignmentHeader.from_dict(
        {
            "HD": {"VN": "1.6", "SO": "coordinate"},
            "SQ": [{"SN": "chr1", "LN": 10000}, {"SN": "chr2", "LN": 5000}],
            "RG": [
                {
                    "ID": "rg1",
                    "SM": "sample1",
                    "LB": "lib1",
                    "FO": "TACG",
                    "KS": "TCAG",
                },
                {"ID": "rg2", "SM": "sample2"},
            ],
        }
    )


def _segment(header, name, ref_id, start, cigar, flag=0, rg="rg2"):
    segment = pysam.AlignedSegment(header)
    segment.query_name = name
    segment.flag = flag
    segment.reference_id = ref_id
    segment.reference_start = start
    segment.mapping_quality = 60
    segment.cigarstring = cigar
    length = query_length(parse_cigar(cigar))
    segment.query_sequence = bases_for(length)
    segment.query_qualities = pysam.qualitystring_to_array("I" * length)
    segment.set_tag("RG", rg)
    return segment


@pytest.fixture
def sample_bam_file(tmp_path, bam_header):
    """Coordinate-sorted, indexed BAM with a handful of alignments."""
    bam_path = tmp_path / "sample.bam"
    segments = [
        _segment(bam_header, "read_a", 0, 99, "10M"),
        _segment(bam_header, "read_b", 0, 199, "3S8M2I5M2S"),
        _segment(bam_header, "read_c", 0, 499, "5M100N5M"),
        _segment(bam_header, "read_d", 1, 49, "2H12M"),
    ]
    with pysam.AlignmentFile(str(bam_path), "wb", header=bam_header) as bam:
        for segment in segments:
            bam.write(segment)
    pysam.index(str(bam_path))
    return bam_path
