"""Statistics package."""

from finance_tracker.stats.aggregator import StatisticsService, compute_statistics

__all__ = ["StatisticsService", "compute_statistics"]
