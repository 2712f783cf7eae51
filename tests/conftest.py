"""
Shared pytest fixtures for Link Preview tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

from shared.document_utils import parse_document

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load the Cloud Function module under an importable name
_link_preview_module = _load_module_from_path(
    'link_preview_main',
    PROJECT_ROOT / 'link-preview' / 'main.py'
)


# ============================================================================
# Link Preview Function Fixtures
# ============================================================================

@pytest.fixture
def link_preview_module():
    """Returns the loaded link-preview module (for patching constants)."""
    return _link_preview_module


@pytest.fixture
def fetch_webpage():
    """Returns fetch_webpage function from link-preview."""
    return _link_preview_module.fetch_webpage


@pytest.fixture
def build_preview():
    """Returns build_preview function from link-preview."""
    return _link_preview_module.build_preview


@pytest.fixture
def preview():
    """Returns main entry point from link-preview."""
    return _link_preview_module.preview


@pytest.fixture
def index():
    """Returns the service description entry point from link-preview."""
    return _link_preview_module.index


# ============================================================================
# HTML Fixtures
# ============================================================================

@pytest.fixture
def make_document():
    """Factory that parses an HTML string into a Document."""
    def _make(html):
        document, error = parse_document(html)
        assert error is None
        return document
    return _make


@pytest.fixture
def sample_article_html():
    """HTML of a typical article page with Open Graph and Twitter tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>  10 Python Tips | Example Blog  </title>
        <meta property="og:title" content="10 Python Tips You Should Know">
        <meta property="og:description" content="Essential tips for every Python developer">
        <meta property="og:image" content="https://example.com/image.jpg">
        <meta name="twitter:card" content="summary_large_image">
        <meta name="description" content="Learn essential Python tips">
        <link rel="icon" href="/static/favicon.png">
    </head>
    <body>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <img src="/inline.png">
            <p>Here are some tips for Python development.</p>
        </article>
    </body>
    </html>
    """


@pytest.fixture
def sample_bare_html():
    """HTML with no meta tags at all."""
    return """
    <html>
    <head><title>Bare Page</title></head>
    <body>
        <img src="/a.png">
        <img src="/b.png">
    </body>
    </html>
    """


@pytest.fixture
def sample_telegram_html():
    """HTML shaped like a t.me channel page."""
    return """
    <html>
    <head>
        <title>Telegram: Contact @somechannel</title>
        <meta property="og:title" content="Some Channel">
        <meta property="og:description" content="Generic description">
        <meta property="og:image" content="https://cdn.telegram.org/og.jpg">
    </head>
    <body>
        <div class="tgme_page">
            <div class="tgme_page_photo">
                <img class="tgme_page_photo_image" src="https://cdn.telegram.org/photo.jpg">
            </div>
            <div class="tgme_page_title"><span dir="auto">Some Channel</span><i class="verified-icon"></i></div>
            <div class="tgme_page_extra">
                1,234 subscribers
            </div>
            <div class="tgme_page_description">News and updates from Some Channel</div>
            <div class="tgme_channel_info_header_username"><a href="https://t.me/somechannel">@somechannel</a></div>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def sample_whatsapp_html():
    """HTML shaped like a chat.whatsapp.com invite page."""
    return """
    <html>
    <head>
        <title>WhatsApp Group Invite</title>
        <meta property="og:title" content="Book Club">
        <meta property="og:image" content="https://pps.whatsapp.net/group.jpg">
    </head>
    <body>
        <h1>Book Club Heading</h1>
        <p>WhatsApp Group Invite</p>
    </body>
    </html>
    """


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, args=None, method='GET'):
            self.args = args or {}
            self.method = method
            self.data = b''

    return MockRequest
