"""
Pattern validation

Compiles each configured pattern once, under the composite flags, and
enforces that it extracts exactly one value (one capture group).
"""
from typing import List, Mapping, Union

import regex

from .base import CompiledPattern, PatternSpec
from .exceptions import CaptureGroupCountError, ConfigurationError, PatternCompileError
from .flags import RegexFlag, describe, engine_flags, normalizes_text, prepare_pattern
from logger import get_logger

logger = get_logger(__name__)


class PatternValidator:
    """
    Compiles raw patterns into CompiledPattern objects

    Validation needs no record data: every failure surfaces as a
    ConfigurationError before processing starts.

    Example:
        validator = PatternValidator(compose(RegexOptions(dotall=True)))
        compiled = validator.validate_all({"first_bar": r".*?(bar\\d)"})
    """

    def __init__(self, flags: RegexFlag = RegexFlag.NONE):
        self.flags = RegexFlag(flags)
        self._engine_flags = engine_flags(self.flags)

    def validate(self, name: str, raw_pattern: str) -> CompiledPattern:
        """
        Compile and check a single pattern

        Args:
            name: Pattern name, used to tag outcomes and errors
            raw_pattern: Regex source

        Returns:
            Compiled pattern

        Raises:
            PatternCompileError: Syntax error under the composed flags
            CaptureGroupCountError: Group count other than one
            ConfigurationError: Empty name or pattern
        """
        if not name:
            raise ConfigurationError("Pattern name must not be empty")
        if not raw_pattern:
            raise ConfigurationError("Pattern must not be empty", pattern_name=name)

        source = prepare_pattern(raw_pattern, self.flags)

        try:
            compiled = regex.compile(source, self._engine_flags)
        except regex.error as e:
            raise PatternCompileError(
                f"Invalid regex '{raw_pattern}': {e}",
                pattern_name=name,
                original_error=e
            ) from e

        if compiled.groups != 1:
            raise CaptureGroupCountError(name, compiled.groups)

        return CompiledPattern(
            name=name,
            pattern=compiled,
            flags=self.flags,
            normalize=normalizes_text(self.flags)
        )

    def validate_spec(self, spec: PatternSpec) -> CompiledPattern:
        return self.validate(spec.name, spec.raw_pattern)

    def validate_all(
        self,
        patterns: Union[Mapping[str, str], List[PatternSpec]]
    ) -> List[CompiledPattern]:
        """
        Validate every pattern of a configuration

        All patterns are attempted so that one error report covers every
        invalid definition.

        Args:
            patterns: Mapping of name -> raw pattern, or PatternSpec list,
                in the order outcomes should be reported

        Returns:
            Compiled patterns in input order

        Raises:
            ConfigurationError: If any pattern is invalid or a name repeats
        """
        if isinstance(patterns, Mapping):
            specs = [PatternSpec(name, raw) for name, raw in patterns.items()]
        else:
            specs = list(patterns)

        compiled: List[CompiledPattern] = []
        errors: List[ConfigurationError] = []
        seen = set()

        for spec in specs:
            if spec.name in seen:
                errors.append(ConfigurationError("Duplicate pattern name", pattern_name=spec.name))
                continue
            seen.add(spec.name)

            try:
                compiled.append(self.validate_spec(spec))
            except ConfigurationError as e:
                logger.error(f"Invalid pattern configuration: {e}")
                errors.append(e)

        if len(errors) == 1:
            raise errors[0]

        if errors:
            details = "; ".join(str(e) for e in errors)
            raise ConfigurationError(f"{len(errors)} invalid patterns: {details}")

        logger.info(f"Validated {len(compiled)} patterns (flags: {describe(self.flags)})")
        return compiled


def validate(raw_pattern: str, flags: RegexFlag = RegexFlag.NONE, name: str = "pattern") -> CompiledPattern:
    """Convenience wrapper around PatternValidator.validate"""
    return PatternValidator(flags).validate(name, raw_pattern)
