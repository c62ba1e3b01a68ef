# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prometheus metrics for the adaptive engine.

Metrics Collected:
- superkids_adaptive_recommendations_total: Recommendations served by source
- superkids_adaptive_recommendation_duration_seconds: Engine latency by source
- superkids_adaptive_ml_fallbacks_total: ML failures that fell back to the heuristic
- superkids_adaptive_persistence_failures_total: Recommendation log write failures

Metrics are registered once on the global registry and exposed by the
/metrics route.
"""

from prometheus_client import Counter, Histogram

NAMESPACE = "superkids"

RECOMMENDATIONS_TOTAL = Counter(
    f"{NAMESPACE}_adaptive_recommendations_total",
    "Total adaptive recommendations served",
    ["source"],
)

RECOMMENDATION_DURATION = Histogram(
    f"{NAMESPACE}_adaptive_recommendation_duration_seconds",
    "Adaptive recommendation duration",
    ["source"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
)

ML_FALLBACKS_TOTAL = Counter(
    f"{NAMESPACE}_adaptive_ml_fallbacks_total",
    "ML connector failures that fell back to the heuristic",
    ["error_type"],
)

PERSISTENCE_FAILURES_TOTAL = Counter(
    f"{NAMESPACE}_adaptive_persistence_failures_total",
    "Failed writes to the recommendation log",
)
