"""
Regex Extraction Processor

Stream-processing stage that extracts named values from each record's
content and routes the record to MATCHED or NOT_MATCHED.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .base import RoutingDecision
from .buffer import BufferExtractor, DEFAULT_CHARACTER_SET, RecordContent
from .engine import MatchEngine
from .exceptions import EvaluationError
from .flags import RegexFlag, RegexOptions, compose, describe
from .loader import merge_pattern_sources
from .router import Router, RoutingPolicy
from .validator import PatternValidator
import metrics
from logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_BUFFER_BYTES = 1024 * 1024


class Relationship(Enum):
    """Terminal routing outcomes exposed to the host"""
    MATCHED = "matched"
    NOT_MATCHED = "unmatched"


@dataclass(frozen=True)
class Record:
    """A record flowing through the stage: content plus named metadata"""
    record_id: str
    content: RecordContent
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass
class ExtractionConfig:
    """Everything needed to build a processor"""
    patterns: Dict[str, str] = field(default_factory=dict)
    options: RegexOptions = field(default_factory=RegexOptions)
    max_buffer_bytes: Optional[int] = DEFAULT_MAX_BUFFER_BYTES
    character_set: str = DEFAULT_CHARACTER_SET
    match_timeout: Optional[float] = None
    routing_policy: RoutingPolicy = RoutingPolicy.EVALUATED
    enable_metrics: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> "ExtractionConfig":
        """
        Build a config from application settings

        Accepts a Settings instance or the SafeSettings wrapper.
        """
        raw = getattr(settings, 'raw', settings)

        return cls(
            patterns=merge_pattern_sources(raw.patterns, raw.patterns_file),
            options=RegexOptions.from_settings(raw),
            max_buffer_bytes=raw.max_buffer_bytes,
            character_set=raw.character_set,
            match_timeout=raw.match_timeout_seconds,
            routing_policy=RoutingPolicy.parse(raw.routing_policy),
            enable_metrics=raw.enable_metrics
        )


class RegexExtractionProcessor:
    """
    Extracts one value per named pattern from each record

    Patterns are validated when the processor is built, so configuration
    errors surface before any record is read. The built processor holds
    no per-record state and can process records from several threads.

    Example:
        processor = RegexExtractionProcessor(ExtractionConfig(
            patterns={"first_bar": r"(?s).*?(bar\\d)"}
        ))
        relationship, record = processor.process(Record("r1", b"foo bar1 bar2"))
        # relationship is Relationship.MATCHED
        # record.attributes == {"first_bar": "bar1"}
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()
        self.compile_flags: RegexFlag = compose(self.config.options)

        self.extractor = BufferExtractor(self.config.max_buffer_bytes, self.config.character_set)
        self.patterns = tuple(PatternValidator(self.compile_flags).validate_all(self.config.patterns))
        self.engine = MatchEngine(timeout=self.config.match_timeout)
        self.router = Router(self.config.routing_policy)

        logger.info(
            f"Regex extraction processor ready: {len(self.patterns)} patterns, "
            f"flags: {describe(self.compile_flags)}, "
            f"buffer: {self.config.max_buffer_bytes if self.config.max_buffer_bytes is not None else 'unbounded'} bytes"
        )

    @property
    def relationships(self) -> FrozenSet[Relationship]:
        return frozenset(Relationship)

    @property
    def pattern_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.patterns)

    def evaluate(self, content: RecordContent) -> RoutingDecision:
        """
        Extract, match and route one record's content

        Args:
            content: Record bytes or binary stream

        Returns:
            Routing decision; unmatched with no outcomes if evaluation failed
        """
        window = self.extractor.extract(content)

        if window.truncated:
            logger.debug(f"Content truncated to {window.byte_count} bytes before matching")
            if self.config.enable_metrics:
                metrics.buffer_truncations.inc()

        try:
            outcomes = self.engine.run(window, self.patterns)
        except EvaluationError as e:
            logger.warning(f"Evaluation failed: {e}")
            if self.config.enable_metrics:
                metrics.evaluation_failures.inc()
            return self.router.evaluation_failed()

        if self.config.enable_metrics:
            for outcome in outcomes:
                metrics.pattern_outcomes.labels(outcome.name, 'value' if outcome.matched else 'absent').inc()

        return self.router.decide(outcomes)

    def process(self, record: Record) -> Tuple[Relationship, Record]:
        """
        Process one record

        Extracted values are set as attributes. Names whose pattern produced
        no value are removed from the attributes, never set to an empty
        placeholder. A record that fails evaluation is passed on unchanged.

        Returns:
            Target relationship and the resulting record
        """
        if self.config.enable_metrics:
            with metrics.extraction_duration.time():
                decision = self.evaluate(record.content)
        else:
            decision = self.evaluate(record.content)

        relationship = Relationship.MATCHED if decision.matched else Relationship.NOT_MATCHED

        if decision.outcomes:
            attributes = dict(record.attributes)
            for name in decision.absent_names():
                attributes.pop(name, None)
            attributes.update(decision.attributes())
            record = replace(record, attributes=attributes)

        logger.debug(f"Routed record {record.record_id} to {relationship.value}")
        if self.config.enable_metrics:
            metrics.records_routed.labels(relationship.value).inc()

        return relationship, record

    def process_all(self, records: Iterable[Record]) -> Dict[Relationship, List[Record]]:
        """
        Process a batch of records

        Returns:
            Records per relationship; both relationships are always present
        """
        routed: Dict[Relationship, List[Record]] = {r: [] for r in Relationship}

        for record in records:
            relationship, result = self.process(record)
            routed[relationship].append(result)

        return routed
