"""Bragi Status: health report for Bragi and its Elasticsearch cluster."""

__version__ = "0.1.0"
