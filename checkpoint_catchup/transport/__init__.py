from .fetcher import FetchStats, MetricsFetcher

__all__ = ["FetchStats", "MetricsFetcher"]
