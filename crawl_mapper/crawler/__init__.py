"""Batch crawler: sitemap source, page fetcher, search predicate and scheduler."""
