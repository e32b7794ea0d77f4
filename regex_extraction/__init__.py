"""
Regex Extraction Module

Extracts named values from record content with independently configured
regular expressions, one capture group per pattern, and routes each
record as matched or unmatched.

Components:
- flags: composes regex behavior switches into one flag value
- buffer: bounds and decodes the examined part of a record
- validator: compiles patterns and enforces a single capture group
- engine: searches the window and extracts capture group 1
- router: decides matched/unmatched and which values are exposed

Quick Start:
    from regex_extraction import ExtractionConfig, Record, RegexExtractionProcessor, RegexOptions

    processor = RegexExtractionProcessor(ExtractionConfig(
        patterns={"greeting": "(hello)"},
        options=RegexOptions(multiline=True),
        max_buffer_bytes=4096
    ))

    relationship, record = processor.process(Record("r1", b"hello world"))
"""

from .flags import (
    RegexFlag,
    RegexOptions,
    compose,
    engine_flags
)

from .base import (
    PatternSpec,
    CompiledPattern,
    BufferWindow,
    MatchOutcome,
    RoutingDecision
)

from .exceptions import (
    ExtractionError,
    ConfigurationError,
    PatternCompileError,
    CaptureGroupCountError,
    EvaluationError
)

from .buffer import BufferExtractor, extract
from .validator import PatternValidator, validate
from .engine import MatchEngine
from .router import Router, RoutingPolicy
from .loader import load_pattern_file, merge_pattern_sources

from .processor import (
    Relationship,
    Record,
    ExtractionConfig,
    RegexExtractionProcessor
)

__all__ = [
    # Flags
    "RegexFlag",
    "RegexOptions",
    "compose",
    "engine_flags",

    # Data model
    "PatternSpec",
    "CompiledPattern",
    "BufferWindow",
    "MatchOutcome",
    "RoutingDecision",

    # Errors
    "ExtractionError",
    "ConfigurationError",
    "PatternCompileError",
    "CaptureGroupCountError",
    "EvaluationError",

    # Components
    "BufferExtractor",
    "extract",
    "PatternValidator",
    "validate",
    "MatchEngine",
    "Router",
    "RoutingPolicy",
    "load_pattern_file",
    "merge_pattern_sources",

    # Processing stage
    "Relationship",
    "Record",
    "ExtractionConfig",
    "RegexExtractionProcessor",
]
