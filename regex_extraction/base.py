"""
Data model shared by the extraction components
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import regex

from .flags import RegexFlag


@dataclass(frozen=True)
class PatternSpec:
    """A user-defined extraction: a name and the regex that extracts it"""
    name: str
    raw_pattern: str


@dataclass(frozen=True)
class CompiledPattern:
    """
    A validated pattern, ready to search record content

    Immutable once built, so a single instance is safely shared by every
    record processed under the same configuration.
    """
    name: str
    pattern: regex.Pattern
    flags: RegexFlag
    normalize: bool = False  # NFC-normalize searched text (canonical equivalence)

    @property
    def raw_pattern(self) -> str:
        return self.pattern.pattern


@dataclass(frozen=True)
class BufferWindow:
    """Decoded prefix of a record's content"""
    text: str
    truncated: bool = False
    byte_count: int = 0


@dataclass(frozen=True)
class MatchOutcome:
    """Result of one pattern against one window; value is None when absent"""
    name: str
    value: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class RoutingDecision:
    """Routing verdict for a record plus the outcomes behind it"""
    matched: bool
    outcomes: Tuple[MatchOutcome, ...] = field(default_factory=tuple)

    def attributes(self) -> Dict[str, str]:
        """
        Values to expose as record metadata

        Only outcomes that produced a value appear; absent outcomes are
        omitted entirely rather than mapped to None or "".
        """
        return {o.name: o.value for o in self.outcomes if o.value is not None}

    def absent_names(self) -> Tuple[str, ...]:
        """Names of outcomes that produced no value"""
        return tuple(o.name for o in self.outcomes if o.value is None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'matched': self.matched,
            'outcomes': [{'name': o.name, 'value': o.value} for o in self.outcomes]
        }
