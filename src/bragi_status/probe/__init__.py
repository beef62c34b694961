"""Status probes for Bragi and its Elasticsearch cluster."""
