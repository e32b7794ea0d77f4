"""
Regex Extraction Exception Hierarchy

Separates configuration-time failures, which must stop processing before
any record is read, from evaluation failures on an individual record.
"""
from typing import Optional


class ExtractionError(Exception):
    """
    Base class for extraction errors

    Attributes:
        message: Human-readable error message
        pattern_name: Name of the pattern involved, if any
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        pattern_name: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.pattern_name = pattern_name
        self.original_error = original_error

    def __str__(self):
        if self.pattern_name:
            return f"{self.message} (pattern: {self.pattern_name})"
        return self.message


class ConfigurationError(ExtractionError):
    """
    Configuration cannot be used to process records

    Examples: invalid regex syntax, wrong number of capture groups,
    malformed pattern definition file
    """
    pass


class PatternCompileError(ConfigurationError):
    """Pattern failed to compile under the composed flags"""
    pass


class CaptureGroupCountError(ConfigurationError):
    """Pattern compiled but does not have exactly one capture group"""

    def __init__(self, pattern_name: str, group_count: int):
        super().__init__(
            f"Pattern must have exactly one capture group, found {group_count}",
            pattern_name=pattern_name
        )
        self.group_count = group_count


class EvaluationError(ExtractionError):
    """
    Engine-level failure while searching a record

    A pattern that simply does not match is not an evaluation error.
    """
    pass
