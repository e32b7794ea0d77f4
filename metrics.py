"""
metrics.py - Extraction metrics for monitoring
"""
from prometheus_client import Counter, Histogram, generate_latest

# Metrics definitions
records_routed = Counter(
    'regex_extraction_records_total',
    'Records routed by the extraction stage',
    ['relationship']  # 'matched' or 'unmatched'
)

pattern_outcomes = Counter(
    'regex_extraction_pattern_outcomes_total',
    'Per-pattern extraction outcomes',
    ['pattern', 'result']  # result is 'value' or 'absent'
)

buffer_truncations = Counter(
    'regex_extraction_buffer_truncations_total',
    'Records whose content exceeded the configured buffer limit'
)

evaluation_failures = Counter(
    'regex_extraction_evaluation_failures_total',
    'Records that could not be evaluated (e.g. search timeout)'
)

extraction_duration = Histogram(
    'regex_extraction_duration_seconds',
    'Time spent extracting values from one record'
)

def get_metrics():
    """Get Prometheus metrics"""
    return generate_latest()
