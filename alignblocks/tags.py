"""Normalization of array-valued SAM tags

B-array tags can arrive with several element widths (int8 through uint32 or
float), and different readers hand them over as array.array, numpy arrays,
bytes or plain lists. normalize_tag_array() folds all of these into a single
TagArray at ingestion so downstream decoders never branch on representation.
"""

import array
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .constants import FLOW_START_TAG
from .errors import UnsupportedTagRepresentationError


class TagArrayKind(Enum):
    """Element type of a B-array tag, valued by its SAM subtype letter"""

    INT8 = "c"
    UINT8 = "C"
    INT16 = "s"
    UINT16 = "S"
    INT32 = "i"
    UINT32 = "I"
    FLOAT = "f"


_KIND_BY_DTYPE = {
    np.dtype(np.int8): TagArrayKind.INT8,
    np.dtype(np.uint8): TagArrayKind.UINT8,
    np.dtype(np.int16): TagArrayKind.INT16,
    np.dtype(np.uint16): TagArrayKind.UINT16,
    np.dtype(np.int32): TagArrayKind.INT32,
    np.dtype(np.uint32): TagArrayKind.UINT32,
    np.dtype(np.float32): TagArrayKind.FLOAT,
}

INTEGER_KINDS = frozenset(_KIND_BY_DTYPE.values()) - {TagArrayKind.FLOAT}

_INT32_MIN = np.iinfo(np.int32).min
_INT32_MAX = np.iinfo(np.int32).max


def _narrow_to_int32(values: np.ndarray, tag: str | None) -> np.ndarray:
    if len(values) and (
        int(values.min()) < _INT32_MIN or int(values.max()) > _INT32_MAX
    ):
        raise UnsupportedTagRepresentationError(
            f"{tag or 'Array'} tag values do not fit in int32", tag
        )
    return values.astype(np.int32)


@dataclass(frozen=True)
class TagArray:
    """Array tag value with its element kind

    Attributes:
        kind: Element type the tag was encoded with
        values: Read-only numpy array in the native dtype of ``kind``
    """

    kind: TagArrayKind
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)

    def as_int32(self, tag: str | None = None) -> np.ndarray:
        """Return the values as int32 (integer kinds only)

        Raises:
            UnsupportedTagRepresentationError: For FLOAT arrays, or UINT32
                values above the int32 range
        """
        if self.kind not in INTEGER_KINDS:
            raise UnsupportedTagRepresentationError(
                f"Cannot widen {self.kind.name} tag array to int32", tag
            )
        return _narrow_to_int32(self.values, tag)


def _freeze(values: np.ndarray) -> np.ndarray:
    values = np.array(values, copy=True)
    values.flags.writeable = False
    return values


def normalize_tag_array(value: Any, tag: str | None = None) -> TagArray:
    """Fold any supported array-tag representation into a TagArray

    Args:
        value: Tag value as delivered by the record reader
        tag: Two-letter key, used for error reporting only

    Returns:
        TagArray with the detected element kind

    Raises:
        UnsupportedTagRepresentationError: For scalars, strings, nested or
            non-integer sequences, unsupported element widths and 64-bit
            values outside the int32 range

    Examples:
        >>> normalize_tag_array(array.array("h", [5, 0, 3])).kind
        <TagArrayKind.INT16: 's'>
        >>> normalize_tag_array([1, 2, 3]).kind
        <TagArrayKind.INT32: 'i'>
    """
    if isinstance(value, (bytes, bytearray)):
        # B:c arrays handed over as raw bytes are signed
        return TagArray(TagArrayKind.INT8, _freeze(np.frombuffer(value, np.int8)))

    if isinstance(value, (array.array, np.ndarray)):
        values = np.asarray(value)
        if values.ndim == 1 and values.dtype.kind in "iu" and values.itemsize == 8:
            # 64-bit integers (numpy default, array "l"/"q") narrow like lists
            return TagArray(TagArrayKind.INT32, _freeze(_narrow_to_int32(values, tag)))
        kind = _KIND_BY_DTYPE.get(values.dtype)
        if kind is None or values.ndim != 1:
            raise UnsupportedTagRepresentationError(
                f"Unsupported array tag element type {values.dtype} for {tag}", tag
            )
        return TagArray(kind, _freeze(values))

    if isinstance(value, Sequence) and not isinstance(value, str):
        if not all(
            isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in value
        ):
            raise UnsupportedTagRepresentationError(
                f"Tag {tag} is a sequence of non-integer values", tag
            )
        values = _narrow_to_int32(np.array(value, dtype=np.int64), tag)
        return TagArray(TagArrayKind.INT32, _freeze(values))

    raise UnsupportedTagRepresentationError(
        f"Tag {tag} has unsupported representation {type(value).__name__}", tag
    )


def require_integer_array(
    value: Any, allowed: frozenset[TagArrayKind], tag: str
) -> np.ndarray:
    """Normalize an array tag and check its element kind

    Returns:
        Values widened to int32

    Raises:
        UnsupportedTagRepresentationError: If the value is not an array of
            one of the ``allowed`` kinds
    """
    tag_array = normalize_tag_array(value, tag)
    if tag_array.kind not in allowed:
        raise UnsupportedTagRepresentationError(
            f"Tag {tag} encoded as {tag_array.kind.name}, expected one of "
            f"{', '.join(sorted(k.name for k in allowed))}",
            tag,
        )
    return tag_array.as_int32(tag)


def flow_start_from_tags(tags: Mapping[str, Any]) -> int | None:
    """Return the ZF flow-start index, or None if absent, negative or non-integer"""
    value = tags.get(FLOW_START_TAG)
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        if value >= 0:
            return int(value)
    return None
