"""
Funnel.vc Services
Business logic between the API routers and the database.
"""
from funnel.services.crm import CeleryCRMNotifier, CRMNotifier, MondayClient
from funnel.services.deck_extractor import ExtractedDeck, extract_deck_text, fetch_deck
from funnel.services.founder_profile import FounderProfileService
from funnel.services.pitch import PitchWorkflow, build_pitch_content
from funnel.services.profile_store import ProfileStore

__all__ = [
    "CeleryCRMNotifier",
    "CRMNotifier",
    "ExtractedDeck",
    "FounderProfileService",
    "MondayClient",
    "PitchWorkflow",
    "ProfileStore",
    "build_pitch_content",
    "extract_deck_text",
    "fetch_deck",
]
