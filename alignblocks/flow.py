"""Per-base flow-signal context for flow-space sequencing reads

Flow-based chemistries emit one signal per nucleotide flow (FZ tag, scaled
x100). A base is incorporated during the first flow of its nucleotide after
the previous base's flow; a homopolymer run is incorporated in a single flow.
The builder replays that process in sequencing direction and then serves
contexts in stored (reference) order, which for reverse-strand reads is the
reverse of sequencing order.
"""

from dataclasses import dataclass

import numpy as np

from .constants import FLOW_CONTEXT_RADIUS, FLOW_SIGNAL_TAG, KEY_SIGNAL_UNIT
from .errors import UnsupportedTagRepresentationError
from .logging_config import get_logger
from .record import AlignmentRecord, ReadGroup
from .tags import INTEGER_KINDS, flow_start_from_tags, require_integer_array
from .utils.bam import complement_base, reverse_complement

logger = get_logger(__name__)


@dataclass(frozen=True)
class FlowSignalContext:
    """Flow context of one base

    Attributes:
        flow_index: Index of the incorporating flow in the raw FZ array
        signals: Signals of the flows from ``flow_index - FLOW_CONTEXT_RADIUS``
            to ``flow_index + FLOW_CONTEXT_RADIUS`` in flow order, None where
            the window runs past either end of the signal array
    """

    flow_index: int
    signals: tuple[int | None, ...]

    @property
    def signal(self) -> int | None:
        """Signal of the incorporating flow"""
        return self.signals[FLOW_CONTEXT_RADIUS]


def prepare_flow_signals(
    raw_signals: np.ndarray, flow_start: int, key_sequence: str, first_base: str
) -> np.ndarray:
    """Trim signals to the read and remove key-sequence bleed-through

    When the read's first base (in sequencing direction) matches the last
    base(s) of the key, those key bases were incorporated in the same flow,
    so the first read flow carries an extra 100 per matching key base.

    Args:
        raw_signals: Full FZ signal array
        flow_start: ZF index of the first read flow
        key_sequence: Read-group key sequence (RG:KS)
        first_base: First read base in sequencing direction

    Returns:
        int32 signal array starting at ``flow_start``
    """
    signals = np.array(raw_signals[flow_start:], dtype=np.int32)

    overlap = 0
    for key_base in reversed(key_sequence):
        if key_base != first_base:
            break
        overlap += KEY_SIGNAL_UNIT

    if overlap and len(signals):
        signals[0] = max(int(signals[0]) - overlap, 0)
    return signals


class FlowSignalContextBuilder:
    """Assign flows to read bases and serve per-base flow contexts

    Args:
        signals: Key-corrected signals starting at the first read flow
        flow_order: Cyclic nucleotide flow order (RG:FO)
        flow_start: ZF index of ``signals[0]`` in the raw FZ array
        read_bases: Stored read bases (reference orientation)
        is_negative_strand: Whether the read is reverse-complemented in storage

    Examples:
        >>> builder = FlowSignalContextBuilder(
        ...     np.array([95, 0, 210, 10]), "TACG", 0, "TCC", False
        ... )
        >>> [c.flow_index for c in builder.context_for(0, 3)]
        [0, 2, 2]
    """

    def __init__(
        self,
        signals: np.ndarray,
        flow_order: str,
        flow_start: int,
        read_bases: str,
        is_negative_strand: bool,
    ):
        if not flow_order:
            raise ValueError("Flow order must not be empty")

        self.signals = np.asarray(signals, dtype=np.int32)
        self.flow_order = flow_order.upper()
        self.flow_start = flow_start
        self.n_bases = len(read_bases)
        self.is_negative_strand = is_negative_strand

        if is_negative_strand:
            sequencing_bases = reverse_complement(read_bases.upper())
        else:
            sequencing_bases = read_bases.upper()
        self._contexts = self._assign_flows(sequencing_bases)

    def _flow_base(self, flow: int) -> str:
        return self.flow_order[(self.flow_start + flow) % len(self.flow_order)]

    def _window(self, flow: int) -> tuple[int | None, ...]:
        n_flows = len(self.signals)
        return tuple(
            int(self.signals[f]) if 0 <= f < n_flows else None
            for f in range(flow - FLOW_CONTEXT_RADIUS, flow + FLOW_CONTEXT_RADIUS + 1)
        )

    def _assign_flows(self, bases: str) -> list[FlowSignalContext | None]:
        n_flows = len(self.signals)
        contexts: list[FlowSignalContext | None] = []
        flow = 0
        prev_base = None
        prev_context = None
        assigned_any = False

        for base in bases:
            if base == prev_base and prev_context is not None:
                # Homopolymer: same flow as the previous base
                contexts.append(prev_context)
                continue

            if base not in self.flow_order:
                contexts.append(None)
                prev_base, prev_context = base, None
                continue

            if assigned_any:
                flow += 1
            while flow < n_flows and self._flow_base(flow) != base:
                flow += 1

            if flow >= n_flows:
                logger.debug("Flow signals exhausted before end of read")
                contexts.extend([None] * (len(bases) - len(contexts)))
                break

            context = FlowSignalContext(
                flow_index=self.flow_start + flow, signals=self._window(flow)
            )
            contexts.append(context)
            prev_base, prev_context = base, context
            assigned_any = True

        return contexts

    def context_for(
        self, offset: int, n_bases: int
    ) -> tuple[FlowSignalContext | None, ...]:
        """Flow contexts for stored bases ``[offset, offset + n_bases)``

        Returns:
            One entry per base in reference order; None for bases outside the
            read or that no flow could be assigned to
        """
        result = []
        for i in range(offset, offset + n_bases):
            if not 0 <= i < self.n_bases:
                result.append(None)
                continue
            seq_idx = self.n_bases - 1 - i if self.is_negative_strand else i
            result.append(self._contexts[seq_idx])
        return tuple(result)


def build_flow_context_builder(
    record: AlignmentRecord, read_group: ReadGroup | None
) -> FlowSignalContextBuilder | None:
    """Create a builder for a record, or None if flow data is unavailable

    Flow context needs the FZ tag, the ZF flow start, and the read group's flow
    order and key sequence. Any of these missing, or a read without bases,
    simply means no flow context; an FZ tag of unsupported shape is logged
    and treated the same way.
    """
    if read_group is None or not read_group.flow_order:
        return None
    if read_group.key_sequence is None or not record.read_bases:
        return None

    flow_start = flow_start_from_tags(record.tags)
    raw = record.tags.get(FLOW_SIGNAL_TAG)
    if flow_start is None or raw is None:
        return None

    try:
        raw_signals = require_integer_array(raw, INTEGER_KINDS, FLOW_SIGNAL_TAG)
    except UnsupportedTagRepresentationError as e:
        logger.warning("Ignoring flow signals for %s: %s", record.read_name, e)
        return None

    if record.is_reverse:
        first_base = complement_base(record.read_bases[-1].upper())
    else:
        first_base = record.read_bases[0].upper()

    signals = prepare_flow_signals(
        raw_signals, flow_start, read_group.key_sequence.upper(), first_base
    )
    return FlowSignalContextBuilder(
        signals,
        read_group.flow_order,
        flow_start,
        record.read_bases,
        record.is_reverse,
    )
