"""sitescout - website URL discovery from sitemaps and polite crawling."""

from sitescout.discovery.categorizer import categorize_urls, standard_pages_summary
from sitescout.exceptions import (
    ConfigurationError,
    InvalidInputError,
    SitescoutError,
    UnsafeTargetError,
)
from sitescout.models import ExtractionRequest, ExtractionResult, PageCategory
from sitescout.services.extract import ExtractService
from sitescout.telemetry import LoggingTelemetry, NullTelemetry, Telemetry

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ExtractService",
    "ExtractionRequest",
    "ExtractionResult",
    "InvalidInputError",
    "LoggingTelemetry",
    "NullTelemetry",
    "PageCategory",
    "SitescoutError",
    "Telemetry",
    "UnsafeTargetError",
    "__version__",
    "categorize_urls",
    "standard_pages_summary",
]
