"""Observability module for metrics."""

from contoso_cafe.observability.metrics import (
    ACTIVE_TURNS,
    QNA_REQUESTS,
    RESERVATIONS_TOTAL,
    TURN_ERRORS,
    TURNS_TOTAL,
    VALIDATION_FAILURES,
    record_reservation_outcome,
    record_turn,
)

__all__ = [
    "TURNS_TOTAL",
    "TURN_ERRORS",
    "RESERVATIONS_TOTAL",
    "VALIDATION_FAILURES",
    "QNA_REQUESTS",
    "ACTIVE_TURNS",
    "record_turn",
    "record_reservation_outcome",
]
