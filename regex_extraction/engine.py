"""
Match engine: applies compiled patterns to a content window
"""
from typing import List, Optional, Sequence
import unicodedata

from .base import BufferWindow, CompiledPattern, MatchOutcome
from .exceptions import EvaluationError
from logger import get_logger

logger = get_logger(__name__)


class MatchEngine:
    """
    Searches a window with each pattern and extracts capture group 1

    Every pattern is searched independently over the whole window, so
    leftmost-match precedence and greedy/reluctant quantifiers decide
    which occurrence is captured. A pattern that finds nothing yields an
    absent value; that is a normal outcome, not an error.

    Example:
        engine = MatchEngine()
        outcomes = engine.run(window, compiled_patterns)
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Optional per-pattern search budget in seconds
        """
        self.timeout = timeout

    def run(
        self,
        window: BufferWindow,
        patterns: Sequence[CompiledPattern]
    ) -> List[MatchOutcome]:
        """
        Evaluate all patterns against a window

        Args:
            window: Bounded, decoded record content
            patterns: Compiled patterns, in reporting order

        Returns:
            One outcome per pattern, in the same order

        Raises:
            EvaluationError: If a search exceeds the time budget
        """
        normalized = None
        outcomes = []

        for compiled in patterns:
            text = window.text
            if compiled.normalize:
                if normalized is None:
                    normalized = unicodedata.normalize('NFC', window.text)
                text = normalized

            outcomes.append(MatchOutcome(compiled.name, self._search(compiled, text)))

        return outcomes

    def _search(self, compiled: CompiledPattern, text: str) -> Optional[str]:
        try:
            match = compiled.pattern.search(text, timeout=self.timeout)
        except TimeoutError as e:
            logger.warning(f"Search for pattern '{compiled.name}' exceeded {self.timeout}s")
            raise EvaluationError(
                f"Search exceeded {self.timeout}s time budget",
                pattern_name=compiled.name,
                original_error=e
            ) from e

        if match is None:
            return None

        # Group 1 can be unset even when the overall pattern matched, e.g. "(a)?b"
        return match.group(1)
