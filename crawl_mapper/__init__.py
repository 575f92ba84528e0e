"""
CrawlMapper package initializer.
Defines the package version and exposes the crawl entry points.
"""
__version__ = "0.1.0"

from crawl_mapper.aggregator import CrawlReport
from crawl_mapper.config import BatchConfig, load_config
from crawl_mapper.engine import Engine, crawl_and_search
from crawl_mapper.exceptions import CrawlMapperError, SitemapUnavailable

__all__ = [
    "__version__",
    "BatchConfig",
    "CrawlMapperError",
    "CrawlReport",
    "Engine",
    "SitemapUnavailable",
    "crawl_and_search",
    "load_config",
]
