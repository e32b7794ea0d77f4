"""
Tests for the regex extraction processing stage
"""
import io
import pytest
from unittest.mock import patch

from config import Settings
from regex_extraction import (
    CaptureGroupCountError,
    ConfigurationError,
    EvaluationError,
    ExtractionConfig,
    Record,
    RegexExtractionProcessor,
    RegexFlag,
    RegexOptions,
    Relationship,
    RoutingPolicy
)
import metrics

SAMPLE_STRING = "foo\r\nbar1\r\nbar2\r\nbar3\r\nhello\r\nworld\r\n"


@pytest.fixture
def sample_record():
    return Record(record_id="record-1", content=SAMPLE_STRING.encode("utf-8"))


def make_processor(patterns, **kwargs):
    return RegexExtractionProcessor(ExtractionConfig(patterns=patterns, **kwargs))


class TestConfiguration:
    """Configuration-time behavior"""

    def test_no_capture_groups_fails_before_processing(self):
        with pytest.raises(CaptureGroupCountError):
            make_processor({"regex.result1": ".*"})

    def test_too_many_capture_groups_fails_before_processing(self):
        with pytest.raises(CaptureGroupCountError):
            make_processor({"regex.result1": "(.)(.)"})

    def test_compile_flags(self):
        assert make_processor({}).compile_flags == 0

        processor = make_processor({}, options=RegexOptions(dotall=True, multiline=True))
        assert processor.compile_flags == RegexFlag.DOTALL | RegexFlag.MULTILINE

    def test_relationships(self):
        relationships = make_processor({}).relationships

        assert Relationship.MATCHED in relationships
        assert Relationship.NOT_MATCHED in relationships
        assert len(relationships) == 2

    def test_pattern_names(self):
        processor = make_processor({"b": "(b)", "a": "(a)"})
        assert processor.pattern_names == ("b", "a")

    def test_from_settings(self, tmp_path):
        pattern_file = tmp_path / "patterns.yaml"
        pattern_file.write_text("patterns:\n  world: '(world)'\n")

        settings = Settings(
            patterns={"foo": "(foo)"},
            patterns_file=str(pattern_file),
            multiline=True,
            max_buffer_size="3 B",
            routing_policy="any_match",
            match_timeout_seconds=2.5,
            enable_metrics=False
        )
        config = ExtractionConfig.from_settings(settings)

        assert config.patterns == {"foo": "(foo)", "world": "(world)"}
        assert config.options == RegexOptions(multiline=True)
        assert config.max_buffer_bytes == 3
        assert config.routing_policy is RoutingPolicy.ANY_MATCH
        assert config.match_timeout == 2.5
        assert config.enable_metrics is False

    def test_from_settings_unbounded(self):
        config = ExtractionConfig.from_settings(Settings(max_buffer_size="unbounded"))
        assert config.max_buffer_bytes is None


class TestProcess:
    """Per-record processing"""

    def test_extracts_values(self, sample_record):
        processor = make_processor({
            "regex.result3": r"(?s).*?(bar\d).*",
            "regex.result5": r"(?s).*(bar\d).*",
            "regex.result7": "(?s)(XXX)",
        })

        relationship, record = processor.process(sample_record)

        assert relationship is Relationship.MATCHED
        assert record.attributes["regex.result3"] == "bar1"
        assert record.attributes["regex.result5"] == "bar3"
        assert "regex.result7" not in record.attributes

    def test_multiline_first_line(self, sample_record):
        processor = make_processor({"line": "(.*)"}, options=RegexOptions(multiline=True))

        _, record = processor.process(sample_record)

        assert record.attributes["line"] == "foo"

    def test_match_outside_buffer(self, sample_record):
        processor = make_processor(
            {"regex.result1": "(foo)", "regex.result2": "(world)"},
            max_buffer_bytes=3
        )

        relationship, record = processor.process(sample_record)

        assert relationship is Relationship.MATCHED
        assert record.attributes == {"regex.result1": "foo"}

    def test_no_patterns_routes_matched(self):
        relationship, record = make_processor({}).process(Record("r", b"foo"))

        assert relationship is Relationship.MATCHED
        assert record.attributes == {}

    def test_no_matches_routes_matched_without_attributes(self):
        processor = make_processor(
            {"regex.result3": r".*?(bar\d).*", "regex.result7": "^(XXX)$"},
            options=RegexOptions(multiline=True, dotall=True)
        )

        relationship, record = processor.process(Record("r", b"YYY"))

        assert relationship is Relationship.MATCHED
        assert "regex.result3" not in record.attributes
        assert "regex.result7" not in record.attributes

    def test_no_matches_with_any_match_policy(self):
        processor = make_processor({"bar": r"(bar\d)"}, routing_policy=RoutingPolicy.ANY_MATCH)

        relationship, _ = processor.process(Record("r", b"YYY"))

        assert relationship is Relationship.NOT_MATCHED

    def test_absent_value_removes_existing_attribute(self):
        processor = make_processor({"bar": r"(bar\d)", "foo": "(foo)"})
        incoming = Record("r", b"foo", attributes={"bar": "stale", "other": "kept"})

        _, record = processor.process(incoming)

        assert record.attributes == {"foo": "foo", "other": "kept"}
        assert incoming.attributes == {"bar": "stale", "other": "kept"}

    def test_stream_content(self):
        processor = make_processor({"word": "(world)"})

        _, record = processor.process(Record("r", io.BytesIO(SAMPLE_STRING.encode("utf-8"))))

        assert record.attributes["word"] == "world"

    def test_evaluation_failure_routes_not_matched(self, sample_record):
        processor = make_processor({"slow": "(foo)"}, match_timeout=0.1)
        failure = EvaluationError("Search exceeded 0.1s time budget", pattern_name="slow")

        with patch.object(processor.engine, "_search", side_effect=failure):
            relationship, record = processor.process(sample_record)

        assert relationship is Relationship.NOT_MATCHED
        assert record is sample_record

    def test_backtracking_timeout_routes_not_matched(self):
        processor = make_processor({"slow": r"(\w+\d)", "foo": "(foo)"}, match_timeout=0.05)
        incoming = Record("r", b"foo" + b"a" * 100000, attributes={"slow": "stale"})

        relationship, record = processor.process(incoming)

        assert relationship is Relationship.NOT_MATCHED
        assert record is incoming
        assert record.attributes == {"slow": "stale"}

    def test_deterministic(self, sample_record):
        processor = make_processor({"bar": r"(?s).*?(?:bar\d).*?(bar\d)"})
        assert processor.process(sample_record) == processor.process(sample_record)

    def test_metrics_recorded(self, sample_record):
        processor = make_processor({"metrics_check": "(foo)"})
        processor.process(sample_record)

        output = metrics.get_metrics().decode("utf-8")
        assert 'regex_extraction_pattern_outcomes_total{pattern="metrics_check",result="value"}' in output


class TestProcessAll:

    def test_no_records(self):
        routed = make_processor({"r": "(a)"}).process_all([])

        assert routed == {Relationship.MATCHED: [], Relationship.NOT_MATCHED: []}

    def test_routes_each_record(self):
        processor = make_processor({"bar": r"(bar\d)"}, routing_policy=RoutingPolicy.ANY_MATCH)
        records = [Record("1", b"bar7"), Record("2", b"none"), Record("3", b"xbar2")]

        routed = processor.process_all(records)

        assert [r.record_id for r in routed[Relationship.MATCHED]] == ["1", "3"]
        assert [r.record_id for r in routed[Relationship.NOT_MATCHED]] == ["2"]
        assert routed[Relationship.MATCHED][1].attributes == {"bar": "bar2"}


def test_invalid_configuration_is_configuration_error():
    with pytest.raises(ConfigurationError):
        make_processor({"ok": "(a)"}, character_set="no-such-charset")
