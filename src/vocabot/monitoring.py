"""Monitoring configuration for the bot."""
from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Session metrics
active_sessions = Gauge(
    "vocabot_active_sessions",
    "Number of learning sessions currently presenting words",
)

sessions_started = Counter(
    "vocabot_sessions_started_total",
    "Total number of learning sessions started",
)

sessions_finished = Counter(
    "vocabot_sessions_finished_total",
    "Total number of learning sessions finished",
    ["reason"],  # mastered, early
)

session_rounds = Histogram(
    "vocabot_session_rounds",
    "Number of assessments made in a finished session",
    buckets=[5, 10, 25, 50, 100, 250],
)

# Learning metrics
assessments = Counter(
    "vocabot_assessments_total",
    "Total number of self-assessments",
    ["action"],
)

# Word management metrics
words_imported = Counter(
    "vocabot_words_imported_total",
    "Total number of words imported into word pools",
)

# Error metrics
error_count = Counter(
    "vocabot_errors_total",
    "Total number of errors encountered",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
