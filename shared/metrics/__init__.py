"""Metrics module using Prometheus."""

from .prometheus_metrics import ApiMetrics

__all__ = ["ApiMetrics"]
