"""Prometheus metrics for the Contoso Cafe bot.

Tracks turn volume and failures, reservation outcomes, validation
re-prompts and latency of the external recognizer and Q&A calls.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

# =============================================================================
# Counters
# =============================================================================

TURNS_TOTAL = Counter(
    "cafebot_turns_total",
    "Total turns processed",
    ["activity_type"],
)

TURN_ERRORS = Counter(
    "cafebot_turn_errors_total",
    "Turns that raised an unhandled exception",
)

RESERVATIONS_TOTAL = Counter(
    "cafebot_reservations_total",
    "Reservation dialogs ended, by outcome",
    ["outcome"],
)

VALIDATION_FAILURES = Counter(
    "cafebot_validation_failures_total",
    "Rejected replies in the reservation dialog",
    ["field", "status"],
)

QNA_REQUESTS = Counter(
    "cafebot_qna_requests_total",
    "Knowledge-base lookups, by result",
    ["result"],
)

# =============================================================================
# Gauges
# =============================================================================

ACTIVE_TURNS = Gauge(
    "cafebot_active_turns",
    "Turns currently being processed",
)

# =============================================================================
# Histograms
# =============================================================================

RECOGNIZER_LATENCY = Histogram(
    "cafebot_recognizer_seconds",
    "Intent/entity recognition latency",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

QNA_LATENCY = Histogram(
    "cafebot_qna_seconds",
    "Knowledge-base lookup latency",
    buckets=[0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.0, 5.0, 10.0],
)

# =============================================================================
# Helper Functions
# =============================================================================


def record_turn(activity_type: str) -> None:
    TURNS_TOTAL.labels(activity_type=activity_type).inc()


def record_turn_error() -> None:
    TURN_ERRORS.inc()


def record_reservation_outcome(outcome: str) -> None:
    """Record how a reservation dialog ended (booked, declined, cancelled)."""
    RESERVATIONS_TOTAL.labels(outcome=outcome).inc()


def record_validation_failure(field: str, status: str) -> None:
    VALIDATION_FAILURES.labels(field=field, status=status).inc()


def record_qna_lookup(result: str, latency_ms: float | None = None) -> None:
    """Record a knowledge-base lookup.

    Args:
        result: answered, no_answer or error
        latency_ms: Round-trip time in milliseconds
    """
    QNA_REQUESTS.labels(result=result).inc()

    # Convert from ms to seconds
    if latency_ms is not None and latency_ms > 0:
        QNA_LATENCY.observe(latency_ms / 1000)


def record_recognizer_latency(latency_ms: float) -> None:
    if latency_ms > 0:
        RECOGNIZER_LATENCY.observe(latency_ms / 1000)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output.

    Returns:
        Metrics in Prometheus text exposition format.
    """
    return generate_latest()


def get_content_type() -> str:
    """Get the content type for Prometheus metrics.

    Returns:
        Content-Type header value for Prometheus metrics.
    """
    return CONTENT_TYPE_LATEST
