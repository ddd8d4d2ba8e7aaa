"""
Deck Extraction Service
Download pitch decks and extract their text with PyMuPDF.
"""

import logging
from dataclasses import dataclass

import fitz  # PyMuPDF
import httpx

from funnel.core.config import settings
from funnel.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedDeck:
    """Full text and page count of a deck."""

    full_text: str
    pages: int


def extract_deck_text(content: bytes) -> ExtractedDeck:
    """
    Extract text from PDF content.

    Args:
        content: Raw PDF bytes

    Returns:
        ExtractedDeck with the concatenated page text

    Raises:
        ExtractionError: If the document cannot be read or has no text
    """
    if not content:
        raise ExtractionError()

    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception as e:
        logger.error(f"PDF open error: {e}")
        raise ExtractionError() from e

    try:
        text_parts = [page.get_text() for page in doc]
        pages = doc.page_count
    except Exception as e:
        logger.error(f"PDF extraction error: {e}")
        raise ExtractionError() from e
    finally:
        doc.close()

    full_text = "\n".join(text_parts).strip()
    if not full_text:
        logger.warning(f"PDF with {pages} pages contained no extractable text")
        raise ExtractionError("No text could be extracted from the pitch deck.")

    return ExtractedDeck(full_text=full_text, pages=pages)


async def fetch_deck(url: str) -> bytes:
    """
    Download a deck over HTTP.

    Args:
        url: Public deck URL

    Returns:
        Response body

    Raises:
        ExtractionError: On any transport error, non-2xx status or oversize body
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.deck_fetch_timeout_seconds,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Deck download failed for {url}: {e}")
        raise ExtractionError("Failed to download pitch deck.") from e

    if len(response.content) > settings.deck_max_bytes:
        raise ExtractionError("Pitch deck is too large.")

    return response.content
