"""Tests for constants and enums."""

from enum import Enum

from alignblocks.constants import (
    APP_NAME,
    MATCH_OPS,
    MAX_REDUCED_COUNT,
    NO_QUALITY,
    REFERENCE_CONSUMING_OPS,
    CigarOp,
    GapType,
    Strand,
)


class TestCigarOp:
    """Tests for the CigarOp enum."""

    def test_is_enum(self):
        """Test CigarOp is an Enum."""
        assert issubclass(CigarOp, Enum)

    def test_values_are_sam_characters(self):
        """Test every operator is keyed by its one-character SAM code."""
        assert "".join(op.value for op in CigarOp) == "M=XIDNSHP"

    def test_lookup_by_character(self):
        """Test operators can be looked up by character."""
        assert CigarOp("N") is CigarOp.SKIPPED_REGION

    def test_match_ops_consume_reference(self):
        """Test match operators consume the reference and I/S do not."""
        assert MATCH_OPS <= REFERENCE_CONSUMING_OPS
        assert CigarOp.INSERTION not in REFERENCE_CONSUMING_OPS
        assert CigarOp.SOFT_CLIP not in REFERENCE_CONSUMING_OPS


class TestGapTypeAndStrand:
    """Tests for GapType and Strand values."""

    def test_gap_types(self):
        """Test gap type values."""
        assert GapType.DELETION.value == "D"
        assert GapType.SKIPPED_REGION.value == "N"
        assert GapType.ZERO_GAP.value == "O"

    def test_gap_type_from_cigar_op(self):
        """Test reference-skipping operators map onto gap types by value."""
        assert GapType(CigarOp.DELETION.value) is GapType.DELETION
        assert GapType(CigarOp.SKIPPED_REGION.value) is GapType.SKIPPED_REGION

    def test_strands(self):
        """Test strand values."""
        assert {s.value for s in Strand} == {"+", "-", "."}


class TestLimits:
    """Tests for sentinel and limit constants."""

    def test_reduced_count_fits_int16(self):
        """Test the count ceiling is the int16 maximum."""
        assert MAX_REDUCED_COUNT == 2**15 - 1

    def test_no_quality_sentinel(self):
        """Test the missing-quality sentinel value."""
        assert NO_QUALITY == 126

    def test_app_name(self):
        """Test the application name."""
        assert APP_NAME == "alignblocks"


class TestTags:
    """Tests for tag name constants."""

    def test_tag_names(self):
        """Test every tag constant is a tag the package reads."""
        from alignblocks import constants

        tags = {
            name: value
            for name, value in vars(constants).items()
            if name.endswith("_TAG")
        }

        assert tags == {
            "READ_GROUP_TAG": "RG",
            "FLOW_SIGNAL_TAG": "FZ",
            "FLOW_START_TAG": "ZF",
            "REDUCED_READS_TAG": "RR",
        }
