"""Parallel model building over a stream of records

Records are independent, so they can be built on a thread pool. At most
``max_workers * 2`` records are in flight at once, which keeps memory bounded
when the input is a long BAM stream, and results come back in input order.
"""

from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Literal

from .alignment import Alignment, build_alignment
from .config import NameResolver, Preferences
from .constants import DEFAULT_MAX_WORKERS
from .errors import MalformedFormatError
from .logging_config import get_logger
from .record import AlignmentRecord, ReadGroup

logger = get_logger(__name__)

OnError = Literal["raise", "skip"]


def build_alignments(
    records: Iterable[AlignmentRecord],
    *,
    preferences: Preferences | None = None,
    name_resolver: NameResolver | None = None,
    read_groups: Mapping[str, ReadGroup] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_error: OnError = "raise",
) -> Iterator[Alignment]:
    """Build Alignment models for a stream of records

    The preferences, name resolver and read-group table are captured once
    and shared read-only by every worker for the whole batch.

    Args:
        records: Records to process (consumed lazily)
        preferences: Display preferences snapshot
        name_resolver: Chromosome-name canonicalization
        read_groups: Read-group header table keyed by ID
        max_workers: Thread count; 1 builds inline without a pool
        on_error: "raise" to propagate MalformedFormatError, "skip" to log
            and drop the offending record

    Yields:
        Alignment per record, in input order

    Raises:
        ValueError: If max_workers < 1 or on_error is unknown
        MalformedFormatError: For an unparsable CIGAR when on_error="raise"
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")
    if on_error not in ("raise", "skip"):
        raise ValueError(f"Unknown on_error mode: {on_error}")

    preferences = preferences or Preferences()
    read_groups = dict(read_groups) if read_groups else {}

    def build(record: AlignmentRecord) -> Alignment:
        return build_alignment(
            record,
            preferences=preferences,
            name_resolver=name_resolver,
            read_groups=read_groups,
        )

    def resolve(record: AlignmentRecord, future_or_none) -> Alignment | None:
        try:
            if future_or_none is None:
                return build(record)
            return future_or_none.result()
        except MalformedFormatError as e:
            if on_error == "raise":
                raise
            logger.warning("Skipping record %s: %s", record.read_name, e)
            return None

    if max_workers == 1:
        for record in records:
            alignment = resolve(record, None)
            if alignment is not None:
                yield alignment
        return

    window = max_workers * 2
    pending: deque[tuple[AlignmentRecord, Future]] = deque()
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        for record in records:
            pending.append((record, pool.submit(build, record)))
            if len(pending) >= window:
                alignment = resolve(*pending.popleft())
                if alignment is not None:
                    yield alignment

        while pending:
            alignment = resolve(*pending.popleft())
            if alignment is not None:
                yield alignment
