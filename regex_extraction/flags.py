"""
Regex option composition

Turns independent boolean switches into one composite flag value, and
owns the translation of that composite into the regex engine's own
compile flags. No other module knows the engine's flag constants.
"""
from dataclasses import dataclass, fields
from enum import IntFlag
from typing import Any, Mapping
import unicodedata

import regex


class RegexFlag(IntFlag):
    """Composite flag bits, one per regex behavior switch"""
    NONE = 0
    UNIX_LINES = 0x01
    CASE_INSENSITIVE = 0x02
    COMMENTS = 0x04
    MULTILINE = 0x08
    LITERAL = 0x10
    DOTALL = 0x20
    UNICODE_CASE = 0x40
    CANON_EQ = 0x80
    UNICODE_CHARACTER_CLASS = 0x100


@dataclass(frozen=True)
class RegexOptions:
    """Independent regex behavior switches, all off by default"""
    unix_lines: bool = False
    case_insensitive: bool = False
    comments: bool = False
    multiline: bool = False
    literal: bool = False
    dotall: bool = False
    unicode_case: bool = False
    canon_eq: bool = False
    unicode_character_class: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> "RegexOptions":
        """Build options from any object exposing the switch attributes"""
        return cls(**{f.name: bool(getattr(settings, f.name, False)) for f in fields(cls)})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegexOptions":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown regex options: {sorted(unknown)}")
        return cls(**{k: bool(v) for k, v in data.items()})


# Switch name -> composite bit
_OPTION_BITS = {
    'unix_lines': RegexFlag.UNIX_LINES,
    'case_insensitive': RegexFlag.CASE_INSENSITIVE,
    'comments': RegexFlag.COMMENTS,
    'multiline': RegexFlag.MULTILINE,
    'literal': RegexFlag.LITERAL,
    'dotall': RegexFlag.DOTALL,
    'unicode_case': RegexFlag.UNICODE_CASE,
    'canon_eq': RegexFlag.CANON_EQ,
    'unicode_character_class': RegexFlag.UNICODE_CHARACTER_CLASS,
}


def compose(options: RegexOptions) -> RegexFlag:
    """
    Compose the composite flag value for a set of options

    Args:
        options: Regex behavior switches

    Returns:
        Bitwise union of the bits of every enabled switch
    """
    composite = RegexFlag.NONE
    for name, bit in _OPTION_BITS.items():
        if getattr(options, name):
            composite |= bit
    return composite


def engine_flags(composite: RegexFlag) -> int:
    """
    Translate a composite into compile flags for the regex engine

    LITERAL and CANON_EQ have no engine flag; they are applied to the
    pattern text by prepare_pattern.
    """
    flags = 0

    # Without UNIX_LINES each of \r\n, \r, \n, \x0b and \x0c terminates a line
    # for '.', '^' and '$'. Unicode mode adds \x85, \u2028 and \u2029.
    if not composite & RegexFlag.UNIX_LINES:
        flags |= regex.WORD

    if composite & RegexFlag.CASE_INSENSITIVE:
        flags |= regex.IGNORECASE
    if composite & RegexFlag.COMMENTS:
        flags |= regex.VERBOSE
    if composite & RegexFlag.MULTILINE:
        flags |= regex.MULTILINE
    if composite & RegexFlag.DOTALL:
        flags |= regex.DOTALL

    if composite & (RegexFlag.UNICODE_CASE | RegexFlag.UNICODE_CHARACTER_CLASS):
        flags |= regex.UNICODE
    else:
        flags |= regex.ASCII

    return flags


def prepare_pattern(raw_pattern: str, composite: RegexFlag) -> str:
    """Apply the pattern-text transformations a composite requires"""
    pattern = raw_pattern
    if composite & RegexFlag.CANON_EQ:
        pattern = unicodedata.normalize('NFC', pattern)
    if composite & RegexFlag.LITERAL:
        pattern = regex.escape(pattern)
    return pattern


def normalizes_text(composite: RegexFlag) -> bool:
    """Whether searched text must be normalized before matching"""
    return bool(composite & RegexFlag.CANON_EQ)


def describe(composite: RegexFlag) -> str:
    """Readable list of enabled switches, for logging"""
    names = [name for name, bit in _OPTION_BITS.items() if composite & bit]
    return ", ".join(names) if names else "none"
