"""Prometheus metrics for the decision engine."""

from .metrics import MetricsCollector

__all__ = ['MetricsCollector']
