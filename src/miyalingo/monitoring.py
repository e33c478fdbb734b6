"""Monitoring configuration for the trainer."""
from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Progress metrics
answers_recorded = Counter(
    "miyalingo_answers_recorded_total",
    "Total number of answers recorded",
    ["result"],
)

words_mastered = Counter(
    "miyalingo_words_mastered_total",
    "Total number of answers that moved a word into the mastered tier",
)

tracked_words = Gauge(
    "miyalingo_tracked_words",
    "Number of words with a progress record",
)

progress_resets = Counter(
    "miyalingo_progress_resets_total",
    "Total number of full progress resets",
)

# Session metrics
sessions_started = Counter(
    "miyalingo_sessions_started_total",
    "Total number of training sessions started",
)

session_queue_size = Histogram(
    "miyalingo_session_queue_size",
    "Number of items in a freshly started session",
    buckets=[0, 5, 10, 15, 20],
)

requeued_answers = Counter(
    "miyalingo_requeued_answers_total",
    "Total number of items requeued after an incorrect answer",
)

# Storage metrics
repository_errors = Counter(
    "miyalingo_repository_errors_total",
    "Total number of progress repository errors",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
