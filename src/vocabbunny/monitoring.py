"""Monitoring configuration for the application."""
from prometheus_client import Counter, start_http_server

# Quiz metrics
quizzes_graded = Counter(
    "vocabbunny_quizzes_graded_total",
    "Total number of self-graded quiz answers",
    ["result"],
)

daily_goals_reached = Counter(
    "vocabbunny_daily_goals_reached_total",
    "Total number of times a user reached the daily goal",
)

# Word management metrics
words_added = Counter(
    "vocabbunny_words_added_total",
    "Total number of words added to word lists",
)

words_deleted = Counter(
    "vocabbunny_words_deleted_total",
    "Total number of words deleted from word lists",
)

enrichment_failures = Counter(
    "vocabbunny_enrichment_failures_total",
    "Total number of tokens the enrichment service could not process",
)

# Error metrics
error_count = Counter(
    "vocabbunny_errors_total",
    "Total number of errors encountered",
    ["error_type"],
)

# Database metrics
db_errors = Counter(
    "vocabbunny_db_errors_total",
    "Total number of database errors",
    ["error_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
