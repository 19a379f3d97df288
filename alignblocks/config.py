"""Injected collaborators: display preferences and chromosome-name resolution

Both are read-only snapshots taken once per batch of records, so every block
of a record is built against the same soft-clip policy and naming.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .constants import SHOW_SOFT_CLIPPED_ENV_VAR

NameResolver = Callable[[str], str]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Preferences:
    """Display preferences consumed by the block assembler

    Attributes:
        show_soft_clipped: Include soft-clipped bases as blocks and widen the
            displayed start/end accordingly
    """

    show_soft_clipped: bool = False

    @classmethod
    def from_env(cls) -> "Preferences":
        """Build preferences from ALIGNBLOCKS_SHOW_SOFT_CLIPPED

        Raises:
            ValueError: If the variable holds an unrecognized boolean
        """
        raw = os.getenv(SHOW_SOFT_CLIPPED_ENV_VAR, "").strip().lower()
        if raw in _TRUE_VALUES:
            return cls(show_soft_clipped=True)
        if raw in _FALSE_VALUES:
            return cls(show_soft_clipped=False)
        raise ValueError(
            f"Invalid {SHOW_SOFT_CLIPPED_ENV_VAR} value '{raw}'. "
            f"Use one of: {', '.join(sorted((_TRUE_VALUES | _FALSE_VALUES) - {''}))}"
        )


@dataclass(frozen=True)
class ChromosomeAliases:
    """Chromosome-name canonicalization backed by an alias table

    Unknown names resolve to themselves, so an empty table is the identity.

    Examples:
        >>> aliases = ChromosomeAliases({"1": "chr1", "MT": "chrM"})
        >>> aliases("1")
        'chr1'
        >>> aliases("chrX")
        'chrX'
    """

    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))

    def __call__(self, name: str) -> str:
        return self.aliases.get(name, name)

    @classmethod
    def from_file(cls, path: str | Path) -> "ChromosomeAliases":
        """Load a tab-separated alias table (raw name, display name)

        Blank lines and lines starting with '#' are ignored.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If a line does not have exactly two columns
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Alias file not found: {path}")

        aliases = {}
        with open(path) as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                fields = line.split("\t")
                if len(fields) != 2:
                    raise ValueError(
                        f"{path}:{line_no}: expected 2 tab-separated columns, "
                        f"got {len(fields)}"
                    )
                aliases[fields[0].strip()] = fields[1].strip()
        return cls(aliases)


def resolve_name(name: str | None, resolver: NameResolver | None) -> str | None:
    """Canonicalize a reference name, defaulting to the raw name"""
    if name is None or resolver is None:
        return name
    return resolver(name)
