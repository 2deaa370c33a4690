"""Prometheus metrics for Conductor.

Counters and gauges for orchestration runs, session state transitions and
human interaction outcomes.
"""

from prometheus_client import Counter, Gauge, Histogram

# Orchestration metrics
ORCHESTRATION_RUNS = Counter(
    "conductor_orchestration_runs_total",
    "Orchestration runs by outcome",
    labelnames=["outcome"],
)

PLAN_SIZE = Histogram(
    "conductor_plan_items",
    "Number of items in generated execution plans",
    buckets=(0, 1, 2, 3, 5, 8, 13, 21),
)

DETECTION_CONFIDENCE = Histogram(
    "conductor_detection_confidence",
    "Confidence score of tool detection",
    buckets=(0.0, 0.2, 0.4, 0.6, 0.8, 1.0),
)

# Session metrics
SESSION_TRANSITIONS = Counter(
    "conductor_session_transitions_total",
    "Execution context status transitions",
    labelnames=["status"],
)

ACTIVE_SESSIONS = Gauge(
    "conductor_active_sessions",
    "Number of stored execution contexts",
)

# Interaction metrics
INTERACTIONS = Counter(
    "conductor_interactions_total",
    "Interaction requests by type and outcome",
    labelnames=["type", "outcome"],
)

PENDING_INTERACTIONS = Gauge(
    "conductor_pending_interactions",
    "Interaction requests awaiting resolution",
)

INTERACTION_LATENCY = Histogram(
    "conductor_interaction_latency_seconds",
    "Time from submission to resolution of an interaction request",
    labelnames=["type"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)
