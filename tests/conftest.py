"""
Shared pytest fixtures for domlens tests.

Provides reusable fixtures for:
- Settings and a ready-made parser
- The BeautifulSoup adapter
- Sample documents
- A controllable clock for cache expiry
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from domlens.config import Settings, reset_settings
from domlens.dom import SoupAdapter
from domlens.parser import DocumentParser
from domlens.utils.metrics import Metrics


@pytest.fixture(autouse=True)
def reset_global_state():
    """
    Reset the settings singleton and metrics before and after each test.

    Keeps tests isolated from each other's counters and configuration.
    """
    reset_settings()
    Metrics.reset()
    yield
    reset_settings()
    Metrics.reset()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings() -> Settings:
    """Default settings, independent of any domlens.yaml on disk."""
    return Settings()


@pytest.fixture
def parser(test_settings: Settings) -> DocumentParser:
    """Provide a parser with default settings and a fresh cache."""
    return DocumentParser(settings=test_settings)


@pytest.fixture
def adapter() -> SoupAdapter:
    return SoupAdapter()


class FakeClock:
    """Manually advanced time source, in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def minimal_html() -> str:
    """The smallest document exercising images and stats."""
    return '<html><body><p>Hi</p><img src="x.png" alt="y"></body></html>'


@pytest.fixture
def sample_html() -> str:
    """Provide a realistic page with head metadata and every region."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="description" content="Test page description">
    <meta name="keywords" content="python, html, , parsing">
    <meta name="author" content="Jane Doe">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <meta property="og:title" content="OG Title">
    <meta property="og:image" content="">
    <meta name="twitter:card" content="summary">
    <link rel="canonical" href="https://example.com/page">
    <title>Test Page Title</title>
    <style>body { color: red; }</style>
</head>
<body>
    <header class="site-header">
        <nav>
            <a href="/home">Home</a>
            <a href="/products" target="_blank" rel="noopener">Products</a>
            <a>No link</a>
        </nav>
    </header>
    <main>
        <article>
            <h1>Welcome</h1>
            <span class="author-name">Jane Doe</span>
            <time datetime="2024-01-15">January 15</time>
            <span class="category">News</span>
            <p>First paragraph.</p>
            <img src="/a.png" alt="A" width="300px" height="auto">
            <!-- note -->
        </article>
        <img data-src="/lazy.png">
        <img alt="no source">
    </main>
    <aside>Related</aside>
    <footer><p>&copy; 2024 Test Company</p></footer>
    <script>var x = 1;</script>
</body>
</html>
"""


@pytest.fixture
def nested_divs():
    """Factory for HTML with ``levels`` nested div elements around a text node."""

    def build(levels: int, text: str = "deep") -> str:
        return "<div>" * levels + text + "</div>" * levels

    return build
