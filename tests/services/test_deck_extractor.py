"""
Tests for pitch deck download and text extraction.
"""
import fitz
import httpx
import pytest

from funnel.core.exceptions import ExtractionError
from funnel.services import deck_extractor
from funnel.services.deck_extractor import extract_deck_text, fetch_deck


def make_pdf(*pages: str) -> bytes:
    """Build a PDF with one page per string; empty strings give blank pages."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def mock_http(monkeypatch):
    """Route the extractor's AsyncClient through a MockTransport."""
    real_client = httpx.AsyncClient

    def install(handler):
        def factory(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr(deck_extractor.httpx, "AsyncClient", factory)

    return install


class TestExtractDeckText:
    """Tests for extract_deck_text()."""

    def test_extracts_all_pages(self):
        deck = extract_deck_text(make_pdf("Problem: invoices are slow", "Solution: Ledgerly"))

        assert deck.pages == 2
        assert "invoices are slow" in deck.full_text
        assert "Ledgerly" in deck.full_text

    def test_blank_deck_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_deck_text(make_pdf(""))

        assert exc_info.value.detail == "No text could be extracted from the pitch deck."

    def test_garbage_bytes_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_deck_text(b"this is not a pdf")

        assert exc_info.value.detail == "Failed to process pitch deck PDF."

    def test_empty_content_rejected(self):
        with pytest.raises(ExtractionError):
            extract_deck_text(b"")


class TestFetchDeck:
    """Tests for fetch_deck()."""

    @pytest.mark.asyncio
    async def test_returns_body(self, mock_http):
        pdf = make_pdf("Hello investors")
        mock_http(lambda request: httpx.Response(200, content=pdf))

        assert await fetch_deck("https://decks.example.com/deck.pdf") == pdf

    @pytest.mark.asyncio
    async def test_http_error_status(self, mock_http):
        mock_http(lambda request: httpx.Response(404))

        with pytest.raises(ExtractionError) as exc_info:
            await fetch_deck("https://decks.example.com/missing.pdf")

        assert exc_info.value.detail == "Failed to download pitch deck."

    @pytest.mark.asyncio
    async def test_transport_error(self, mock_http):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        mock_http(handler)

        with pytest.raises(ExtractionError):
            await fetch_deck("https://decks.example.com/deck.pdf")

    @pytest.mark.asyncio
    async def test_oversized_deck(self, mock_http, monkeypatch):
        monkeypatch.setattr(deck_extractor.settings, "deck_max_bytes", 10)
        mock_http(lambda request: httpx.Response(200, content=b"x" * 11))

        with pytest.raises(ExtractionError) as exc_info:
            await fetch_deck("https://decks.example.com/deck.pdf")

        assert exc_info.value.detail == "Pitch deck is too large."
