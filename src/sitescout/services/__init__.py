"""Service layer for sitescout.

- ExtractService: URL discovery for one website (sitemaps, then crawling)
"""

from sitescout.services.extract import ExtractionState, ExtractService

__all__ = [
    "ExtractService",
    "ExtractionState",
]
