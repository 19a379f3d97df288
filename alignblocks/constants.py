"""Constants and configuration for alignblocks"""

from enum import Enum

# ==============================================================================
# CIGAR Operations and Gap Types
# ==============================================================================


class CigarOp(Enum):
    """CIGAR operators, valued by their SAM character"""

    MATCH = "M"
    PERFECT_MATCH = "="
    MISMATCH = "X"
    INSERTION = "I"
    DELETION = "D"
    SKIPPED_REGION = "N"
    SOFT_CLIP = "S"
    HARD_CLIP = "H"
    PADDING = "P"


# Operators that always produce an alignment block
MATCH_OPS = frozenset({CigarOp.MATCH, CigarOp.PERFECT_MATCH, CigarOp.MISMATCH})

# Operators that advance the reference coordinate
REFERENCE_CONSUMING_OPS = MATCH_OPS | {CigarOp.DELETION, CigarOp.SKIPPED_REGION}

# CIGAR text meaning "no alignment structure"
NO_CIGAR = "*"


class GapType(Enum):
    """Classification of the seam between two consecutive blocks"""

    DELETION = "D"
    SKIPPED_REGION = "N"
    ZERO_GAP = "O"  # Adjacent blocks, or a split around an insertion/padding


class Strand(Enum):
    """Strand of a read or of one end of a read pair"""

    POSITIVE = "+"
    NEGATIVE = "-"
    NONE = "."


# ==============================================================================
# Missing-Data Sentinels
# ==============================================================================

# Block base when the record carries no sequence at all ("*")
NO_SEQUENCE_BASE = "="

# Block base when the sequence is shorter than the CIGAR requires
UNKNOWN_BASE = "?"

# Block quality when qualities are missing or truncated
NO_QUALITY = 126

# ==============================================================================
# Tags
# ==============================================================================

READ_GROUP_TAG = "RG"
FLOW_SIGNAL_TAG = "FZ"  # Flow signals, scaled x100, in sequencing direction
FLOW_START_TAG = "ZF"  # Index of the first read flow within FZ
REDUCED_READS_TAG = "RR"

# Synthetic attribute key answered by Alignment.get_attribute()
TEMPLATE_ORIENTATION_KEY = "TEMPLATE_ORIENTATION"

# ==============================================================================
# Flow Signals and Reduced Reads
# ==============================================================================

# Signal contributed by one key base (signals are scaled x100)
KEY_SIGNAL_UNIT = 100

# Flows on each side of the incorporating flow kept in a FlowSignalContext
FLOW_CONTEXT_RADIUS = 1

# Decoded reduced-read counts are stored as int16
MAX_REDUCED_COUNT = 32767

# ==============================================================================
# SAM Flag Bits
# ==============================================================================

FLAG_PAIRED = 0x1
FLAG_PROPER_PAIR = 0x2
FLAG_UNMAPPED = 0x4
FLAG_MATE_UNMAPPED = 0x8
FLAG_REVERSE = 0x10
FLAG_MATE_REVERSE = 0x20
FLAG_FIRST_OF_PAIR = 0x40
FLAG_SECOND_OF_PAIR = 0x80
FLAG_SECONDARY = 0x100
FLAG_QC_FAIL = 0x200
FLAG_DUPLICATE = 0x400
FLAG_SUPPLEMENTARY = 0x800

# ==============================================================================
# Application Metadata and CLI Defaults
# ==============================================================================

APP_NAME = "alignblocks"
APP_DESCRIPTION = "Expand SAM/BAM alignment records into render-ready block models"

SHOW_SOFT_CLIPPED_ENV_VAR = "ALIGNBLOCKS_SHOW_SOFT_CLIPPED"

DEFAULT_MAX_WORKERS = 4
DEFAULT_RECORD_LIMIT = 20
