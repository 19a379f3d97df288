"""Reduced-read count decoding (RR tag)

A reduced read stands in for several collapsed near-duplicate reads. Its RR
tag stores the count at the first base, followed by per-base offsets from
that first count.
"""

from collections.abc import Mapping
from typing import Any

import numpy as np

from .constants import MAX_REDUCED_COUNT, REDUCED_READS_TAG
from .errors import UnsupportedTagRepresentationError
from .logging_config import get_logger
from .tags import INTEGER_KINDS, require_integer_array

logger = get_logger(__name__)

_MIN_COUNT = np.iinfo(np.int16).min


def decode_reduced_counts(value: Any) -> np.ndarray | None:
    """Decode an RR tag value into per-base counts

    Args:
        value: RR tag value, or None if the record has no RR tag

    Returns:
        Read-only int16 array with ``out[0] = in[0]`` and
        ``out[i] = min(in[0] + in[i], MAX_REDUCED_COUNT)``, or None when
        ``value`` is None

    Raises:
        UnsupportedTagRepresentationError: If the tag is not an integer array

    Examples:
        >>> decode_reduced_counts([5, 0, 3, -2]).tolist()
        [5, 5, 8, 3]
    """
    if value is None:
        return None

    encoded = require_integer_array(value, INTEGER_KINDS, REDUCED_READS_TAG).astype(
        np.int64
    )
    if len(encoded) == 0:
        decoded = np.zeros(0, dtype=np.int16)
    else:
        baseline = encoded[0]
        decoded = np.clip(baseline + encoded, _MIN_COUNT, MAX_REDUCED_COUNT)
        decoded[0] = np.clip(baseline, _MIN_COUNT, MAX_REDUCED_COUNT)
        decoded = decoded.astype(np.int16)

    decoded.flags.writeable = False
    return decoded


def reduced_counts_from_tags(tags: Mapping[str, Any]) -> np.ndarray | None:
    """Decode the RR tag of a record, treating unsupported encodings as absent"""
    try:
        return decode_reduced_counts(tags.get(REDUCED_READS_TAG))
    except UnsupportedTagRepresentationError as e:
        logger.info("Found reduced reads tag, but could not decode it: %s", e)
        return None
