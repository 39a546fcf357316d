"""Pytest configuration and fixtures for sitescout MCP server tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sitescout.models import ExtractionResult


@pytest.fixture
def extraction_result() -> ExtractionResult:
    """Result returned by the mock extract service."""
    return ExtractionResult(
        base_url="https://www.example.com/",
        urls=["https://www.example.com/", "https://www.example.com/chi-siamo"],
        total_urls=2,
        robots_txt_found=True,
        sitemap_found=True,
        sources={"sitemap": 2},
    )


@pytest.fixture
def mock_extract_service(extraction_result: ExtractionResult) -> MagicMock:
    """Create mock extract service."""
    mock = MagicMock()
    mock.extract = AsyncMock(return_value=extraction_result)
    return mock
