"""Tests for BAM utility functions"""

import pysam
import pytest


class TestSequenceHelpers:
    """Tests for complement_base() and reverse_complement()"""

    def test_reverse_complement(self):
        """Test reverse complement keeps case and handles empty strings"""
        from alignblocks.utils.bam import reverse_complement

        assert reverse_complement("ACGTN") == "NACGT"
        assert reverse_complement("acgt") == "acgt"
        assert reverse_complement("") == ""

    def test_non_acgt_becomes_n(self):
        """Test bases other than ACGT complement to N"""
        from alignblocks.utils.bam import complement_base, reverse_complement

        assert complement_base("R") == "N"
        assert complement_base("G") == "C"
        assert reverse_complement("AR") == "NT"


class TestParseRegion:
    """Tests for parse_region()"""

    @pytest.mark.parametrize(
        "region,expected",
        [
            ("chr1", ("chr1", None, None)),
            ("chr1:500", ("chr1", 500, 500)),
            ("chr1:1000-2000", ("chr1", 1000, 2000)),
            ("chr1:1,000-2,000", ("chr1", 1000, 2000)),
            (" chr2:10-20 ", ("chr2", 10, 20)),
        ],
    )
    def test_valid_regions(self, region, expected):
        """Test region strings with and without coordinates"""
        from alignblocks.utils.bam import parse_region

        assert parse_region(region) == expected

    @pytest.mark.parametrize(
        "region", ["", "   ", "chr1:abc", "chr1:10-5", ":10-20", "chr1:0-5", "a:b:c"]
    )
    def test_invalid_regions(self, region):
        """Test malformed regions parse to all None"""
        from alignblocks.utils.bam import parse_region

        assert parse_region(region) == (None, None, None)


class TestReadGroupsFromHeader:
    """Tests for read_groups_from_header()"""

    def test_read_group_fields(self, bam_header):
        """Test @RG sample, library, flow order and key sequence are read"""
        from alignblocks.utils.bam import read_groups_from_header

        read_groups = read_groups_from_header(bam_header)

        assert set(read_groups) == {"rg1", "rg2"}
        assert read_groups["rg1"].sample == "sample1"
        assert read_groups["rg1"].library == "lib1"
        assert read_groups["rg1"].flow_order == "TACG"
        assert read_groups["rg1"].key_sequence == "TCAG"
        assert read_groups["rg2"].flow_order is None

    def test_header_without_read_groups(self):
        """Test a header with no @RG lines gives an empty mapping"""
        from alignblocks.utils.bam import read_groups_from_header

        header = pysam.AlignmentHeader.from_dict(
            {"SQ": [{"SN": "chr1", "LN": 100}]}
        )

        assert read_groups_from_header(header) == {}


class TestRecordFromSegment:
    """Tests for record_from_segment()"""

    def test_mapped_paired_segment(self, bam_header):
        """Test a paired pysam segment converts to 1-based record fields"""
        from alignblocks.utils.bam import record_from_segment

        segment = pysam.AlignedSegment(bam_header)
        segment.query_name = "read1"
        segment.flag = 99
        segment.reference_id = 0
        segment.reference_start = 99
        segment.mapping_quality = 60
        segment.cigarstring = "3S10M2S"
        segment.query_sequence = "ACGT" * 3 + "ACG"
        segment.query_qualities = pysam.qualitystring_to_array("I" * 15)
        segment.next_reference_id = 0
        segment.next_reference_start = 299
        segment.template_length = 250
        segment.set_tag("RG", "rg1")
        segment.set_tag("NM", 1)

        record = record_from_segment(segment)

        assert record.read_name == "read1"
        assert record.reference_name == "chr1"
        assert record.alignment_start == 100
        assert record.alignment_end == 109
        assert record.cigar == "3S10M2S"
        assert record.read_bases == "ACGTACGTACGTACG"
        assert record.base_qualities == bytes([40] * 15)
        assert record.mapping_quality == 60
        assert record.inferred_insert_size == 250
        assert record.mate_reference_name == "chr1"
        assert record.mate_alignment_start == 300
        assert record.is_paired and record.is_first_of_pair
        assert record.is_mate_reverse
        assert record.tags == {"RG": "rg1", "NM": 1}

    def test_unmapped_segment(self, bam_header):
        """Test an unmapped segment gets zero coordinates and a "*" CIGAR"""
        from alignblocks.utils.bam import record_from_segment

        segment = pysam.AlignedSegment(bam_header)
        segment.query_name = "unmapped"
        segment.flag = 4
        segment.reference_id = -1
        segment.reference_start = -1
        segment.query_sequence = "ACGT"

        record = record_from_segment(segment)

        assert record.is_unmapped
        assert record.reference_name is None
        assert record.alignment_start == 0
        assert record.alignment_end == 0
        assert record.cigar == "*"
        assert record.base_qualities is None
        assert record.mate_alignment_start == 0


class TestOpenAndIterate:
    """Tests for open_bam_safe() and iter_records()"""

    def test_missing_file(self, tmp_path):
        """Test opening a nonexistent BAM raises FileNotFoundError"""
        from alignblocks.utils.bam import open_bam_safe

        with pytest.raises(FileNotFoundError):
            with open_bam_safe(tmp_path / "missing.bam"):
                pass

    def test_iterate_all(self, sample_bam_file):
        """Test iteration without a region yields every record in order"""
        from alignblocks.utils.bam import iter_records, open_bam_safe

        with open_bam_safe(sample_bam_file) as bam:
            names = [r.read_name for r in iter_records(bam)]

        assert names == ["read_a", "read_b", "read_c", "read_d"]

    def test_iterate_region(self, sample_bam_file):
        """Test region fetch returns only overlapping records"""
        from alignblocks.utils.bam import iter_records, open_bam_safe

        with open_bam_safe(sample_bam_file) as bam:
            records = list(iter_records(bam, "chr1:150-300"))

        assert [r.read_name for r in records] == ["read_b"]
        assert records[0].alignment_start == 200

    def test_iterate_whole_reference(self, sample_bam_file):
        """Test a bare reference name fetches that whole contig"""
        from alignblocks.utils.bam import iter_records, open_bam_safe

        with open_bam_safe(sample_bam_file) as bam:
            records = list(iter_records(bam, "chr2"))

        assert [r.read_name for r in records] == ["read_d"]
        assert records[0].cigar == "2H12M"

    def test_invalid_region(self, sample_bam_file):
        """Test an unparseable region raises ValueError"""
        from alignblocks.utils.bam import iter_records, open_bam_safe

        with open_bam_safe(sample_bam_file) as bam:
            with pytest.raises(ValueError, match="Invalid region"):
                list(iter_records(bam, "chr1:9-3"))
