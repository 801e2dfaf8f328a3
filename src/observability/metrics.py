"""
Prometheus metrics definitions for the smart-waste API.

Metrics are organized by category:
- HTTP/API metrics: Request counts, latency, errors
- AI metrics: Vision/chat call latency and outcomes
- Classification metrics: Classifications by mode and outcome
- Bookkeeping metrics: Best-effort persistence failures, badge awards
- Pickup metrics: Scheduled pickups

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter, Gauge, Histogram, Info

logger = logging.getLogger(__name__)

# =============================================================================
# HTTP/API Metrics
# =============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests received",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

# =============================================================================
# Error Metrics
# =============================================================================

errors_total = Counter(
    "errors_total",
    "Total errors by type and component",
    ["error_type", "component"],  # component: api/database/ai/bookkeeping
)

# =============================================================================
# AI Metrics
# =============================================================================

ai_requests_total = Counter(
    "ai_requests_total",
    "Total generative AI requests",
    ["provider", "kind", "status"],  # kind: vision/chat/ping, status: success/error
)

ai_request_duration_seconds = Histogram(
    "ai_request_duration_seconds",
    "Generative AI request duration in seconds",
    ["provider", "kind"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0],
)

# =============================================================================
# Classification Metrics
# =============================================================================

classifications_total = Counter(
    "classifications_total",
    "Total waste classifications",
    ["mode", "status"],  # mode: basic/enhanced, status: success/error
)

classification_categories_total = Counter(
    "classification_categories_total",
    "Classified items by category",
    ["category"],
)

# =============================================================================
# Bookkeeping Metrics
# =============================================================================

bookkeeping_failures_total = Counter(
    "bookkeeping_failures_total",
    "Best-effort persistence failures that did not affect the user response",
    ["operation"],  # save_classification/update_user_stats/award_badges
)

badges_awarded_total = Counter(
    "badges_awarded_total",
    "Total badges awarded",
    ["requirement_type"],
)

points_awarded_total = Counter(
    "points_awarded_total",
    "Total gamification points awarded",
)

# =============================================================================
# Pickup Metrics
# =============================================================================

pickups_scheduled_total = Counter(
    "pickups_scheduled_total",
    "Total pickup requests created",
    ["recurring_schedule", "priority"],
)

pickup_validation_failures_total = Counter(
    "pickup_validation_failures_total",
    "Pickup submissions rejected by validation",
    ["field"],
)

# =============================================================================
# Application Info
# =============================================================================

app_info = Info(
    "app_info",
    "Application information",
)


def init_metrics():
    """
    Initialize metrics with application information.

    This should be called once at application startup to set
    static metadata about the application.
    """
    import os
    import sys
    from src.config import SENTRY_ENVIRONMENT

    app_info.info(
        {
            "version": os.getenv("GIT_COMMIT_SHA", "dev")[:7],
            "environment": SENTRY_ENVIRONMENT,
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
        }
    )

    logger.info("Prometheus metrics initialized")
