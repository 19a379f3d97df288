"""Tests for the alignblocks command-line interface"""

import pytest
from rich.console import Console


@pytest.fixture
def recorded_console(monkeypatch):
    """Swap the CLI console for one that records output"""
    from alignblocks import cli

    console = Console(record=True, width=200)
    monkeypatch.setattr(cli, "console", console)
    return console


class TestArgumentParsing:
    """Tests for build_parser()"""

    def test_defaults(self):
        """Test default option values"""
        from alignblocks.cli import build_parser

        args = build_parser().parse_args(["reads.bam"])

        assert args.bam == "reads.bam"
        assert args.region is None
        assert args.read_name is None
        assert args.show_soft_clipped is None
        assert args.limit == 20
        assert args.workers == 4
        assert args.aliases is None
        assert args.blocks is False

    def test_short_options(self):
        """Test the short forms of region, name, limit and workers"""
        from alignblocks.cli import build_parser

        args = build_parser().parse_args(
            ["reads.bam", "-r", "chr1:1-100", "-n", "read_7", "-l", "0", "-w", "1"]
        )

        assert args.region == "chr1:1-100"
        assert args.read_name == "read_7"
        assert args.limit == 0
        assert args.workers == 1

    def test_show_soft_clipped_flag(self):
        """Test --show-soft-clipped sets the override"""
        from alignblocks.cli import build_parser

        args = build_parser().parse_args(["reads.bam", "--show-soft-clipped"])

        assert args.show_soft_clipped is True

    def test_version(self, capsys):
        """Test --version prints the package version and exits cleanly"""
        from alignblocks import __version__
        from alignblocks.cli import build_parser

        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["--version"])

        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_missing_bam_argument(self):
        """Test the BAM path is required"""
        from alignblocks.cli import build_parser

        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestInspectBam:
    """Tests for main() / inspect_bam() on a real BAM file"""

    def test_summary(self, sample_bam_file, recorded_console):
        """Test the summary table lists every read"""
        from alignblocks.cli import main

        assert main([str(sample_bam_file)]) == 0

        output = recorded_console.export_text()
        for name in ("read_a", "read_b", "read_c", "read_d"):
            assert name in output
        assert "5M100N5M" in output

    def test_region_and_blocks(self, sample_bam_file, recorded_console):
        """Test a region filter with the per-read block tables"""
        from alignblocks.cli import main

        exit_code = main([str(sample_bam_file), "-r", "chr1:150-300", "--blocks"])

        output = recorded_console.export_text()
        assert exit_code == 0
        assert "read_b blocks" in output
        assert "insertion" in output
        assert "read_a" not in output

    def test_show_soft_clipped(self, sample_bam_file, recorded_console):
        """Test shown soft clips appear in the block table"""
        from alignblocks.cli import main

        exit_code = main(
            [str(sample_bam_file), "-n", "read_b", "--show-soft-clipped", "--blocks"]
        )

        assert exit_code == 0
        assert "soft clip" in recorded_console.export_text()

    def test_soft_clips_from_env(self, sample_bam_file, recorded_console, monkeypatch):
        """Test the soft-clip policy can come from the environment"""
        from alignblocks.cli import main

        monkeypatch.setenv("ALIGNBLOCKS_SHOW_SOFT_CLIPPED", "1")

        assert main([str(sample_bam_file), "-n", "read_b", "--blocks"]) == 0
        assert "soft clip" in recorded_console.export_text()

    def test_aliases(self, sample_bam_file, recorded_console, tmp_path):
        """Test an alias file renames chromosomes in the output"""
        from alignblocks.cli import main

        alias_file = tmp_path / "aliases.tsv"
        alias_file.write_text("chr2\tcontig_two\n")

        assert main([str(sample_bam_file), "--aliases", str(alias_file)]) == 0
        assert "contig_two:50-61" in recorded_console.export_text()

    def test_no_matches(self, sample_bam_file, recorded_console):
        """Test an unmatched read name prints a notice and succeeds"""
        from alignblocks.cli import main

        assert main([str(sample_bam_file), "-n", "nobody"]) == 0
        assert "No matching alignments" in recorded_console.export_text()

    def test_missing_file(self, tmp_path, recorded_console):
        """Test a missing BAM prints an error and returns 1"""
        from alignblocks.cli import main

        assert main([str(tmp_path / "missing.bam")]) == 1
        assert "does not exist" in recorded_console.export_text()

    def test_invalid_workers(self, sample_bam_file, recorded_console):
        """Test a zero worker count returns 1"""
        from alignblocks.cli import main

        assert main([str(sample_bam_file), "-w", "0"]) == 1

    def test_invalid_region(self, sample_bam_file, recorded_console):
        """Test an invalid region prints an error and returns 1"""
        from alignblocks.cli import main

        assert main([str(sample_bam_file), "-r", "chr1:20-10"]) == 1
        assert "Invalid region" in recorded_console.export_text()
