"""Command-line interface for inspecting alignment block models"""

import argparse
import sys
from itertools import islice
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import __version__
from .alignment import Alignment
from .batch import build_alignments
from .config import ChromosomeAliases, Preferences
from .constants import (
    APP_DESCRIPTION,
    APP_NAME,
    DEFAULT_MAX_WORKERS,
    DEFAULT_RECORD_LIMIT,
)
from .utils import iter_records, open_bam_safe, read_groups_from_header

# Create Rich console for styled output
console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the alignblocks command"""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - {APP_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  alignblocks reads.bam                          Summarize the first 20 records
  alignblocks reads.bam -r chr1:1,000-2,000      Records overlapping a region
  alignblocks reads.bam -n read_42 --blocks      Block layout of one read
  alignblocks reads.bam --show-soft-clipped      Include soft clips as blocks
        """,
    )
    parser.add_argument("bam", type=str, help="SAM/BAM/CRAM file to read")
    parser.add_argument(
        "--region", "-r", type=str, help="Region to fetch (requires an index)"
    )
    parser.add_argument("--read-name", "-n", type=str, help="Only this read name")
    parser.add_argument(
        "--show-soft-clipped",
        action="store_true",
        default=None,
        help="Build blocks for soft-clipped bases "
        "(default: ALIGNBLOCKS_SHOW_SOFT_CLIPPED)",
    )
    parser.add_argument(
        "--limit",
        "-l",
        type=int,
        default=DEFAULT_RECORD_LIMIT,
        help=f"Maximum records to show (default: {DEFAULT_RECORD_LIMIT}, 0 = all)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Worker threads (default: {DEFAULT_MAX_WORKERS})",
    )
    parser.add_argument(
        "--aliases",
        type=str,
        help="Tab-separated file mapping raw reference names to display names",
    )
    parser.add_argument(
        "--blocks", action="store_true", help="List every block of each record"
    )
    parser.add_argument(
        "--version", "-v", action="version", version=f"{APP_NAME} {__version__}"
    )
    return parser


def summary_table(alignments: list[Alignment]) -> Table:
    """One row per alignment: position, CIGAR, block counts and pair info"""
    table = Table(title="Alignments")
    table.add_column("Read")
    table.add_column("Position")
    table.add_column("CIGAR")
    table.add_column("Blocks", justify="right")
    table.add_column("Ins", justify="right")
    table.add_column("Gaps")
    table.add_column("Pair")
    table.add_column("F1/F2")

    for aln in alignments:
        table.add_row(
            aln.read_name,
            f"{aln.chromosome}:{aln.start + 1}-{aln.end}",
            aln.cigar,
            str(len(aln.blocks)),
            str(len(aln.insertions)),
            "".join(gap.value for gap in aln.gap_types),
            aln.pair_orientation or "-",
            f"{aln.first_of_pair_strand.value}/{aln.second_of_pair_strand.value}",
        )
    return table


def blocks_table(alignment: Alignment) -> Table:
    """Blocks and insertions of one alignment"""
    table = Table(title=f"{alignment.read_name} blocks")
    table.add_column("Kind")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Bases")
    table.add_column("Mean Q", justify="right")
    table.add_column("Counts")

    rows = [("block", b) for b in alignment.blocks]
    rows += [("insertion", b) for b in alignment.insertions]
    for kind, block in rows:
        if block.is_soft_clipped:
            kind = "soft clip"
        mean_q = f"{block.qualities.mean():.1f}" if len(block) else "-"
        counts = "-"
        if block.counts is not None:
            counts = f"{int(block.counts.min())}-{int(block.counts.max())}"
        table.add_row(
            kind,
            str(block.start + 1),
            str(block.end),
            block.bases,
            mean_q,
            counts,
        )
    return table


def inspect_bam(args) -> int:
    """Build and print block models for records of an alignment file

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code: 0 for success, 1 for error
    """
    bam_path = Path(args.bam).resolve()
    if not bam_path.exists():
        console.print(f"[red]Error:[/red] Alignment file does not exist: {bam_path}")
        return 1
    if args.workers < 1:
        console.print("[red]Error:[/red] --workers must be at least 1")
        return 1

    try:
        if args.show_soft_clipped is None:
            preferences = Preferences.from_env()
        else:
            preferences = Preferences(show_soft_clipped=args.show_soft_clipped)
        aliases = ChromosomeAliases.from_file(args.aliases) if args.aliases else None

        with open_bam_safe(bam_path) as bam:
            read_groups = read_groups_from_header(bam.header)
            records = iter_records(bam, args.region)
            if args.read_name:
                records = (r for r in records if r.read_name == args.read_name)
            if args.limit > 0:
                records = islice(records, args.limit)

            alignments = list(
                build_alignments(
                    records,
                    preferences=preferences,
                    name_resolver=aliases,
                    read_groups=read_groups,
                    max_workers=args.workers,
                    on_error="skip",
                )
            )
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if not alignments:
        console.print("[yellow]No matching alignments[/yellow]")
        return 0

    console.print(summary_table(alignments))
    if args.blocks:
        for alignment in alignments:
            console.print(blocks_table(alignment))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the alignblocks command"""
    args = build_parser().parse_args(argv)
    return inspect_bam(args)


if __name__ == "__main__":
    sys.exit(main())
