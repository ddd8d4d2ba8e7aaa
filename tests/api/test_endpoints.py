"""
API tests for matches, profiles, pitches and VC pages.
"""
import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from agents.matching.models import CandidateScore, DeckAnalysis, PitchAnalysis, PitchVerdict
from agents.matching.oracle import RankingOracleError
from agents.matching.ranker import FALLBACK_RATIONALE
from funnel.services.deck_extractor import ExtractedDeck
from funnel.services.pitch import NO_CONTENT_MESSAGE
from tests.conftest import auth_headers, create_vc, make_token
from tests.fixtures.factories import FounderProfileFactory


class TestAuthentication:
    """Tests for bearer token handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [("get", "/matches"), ("get", "/profile"), ("post", "/pitch"), ("post", "/vc/profile")],
    )
    async def test_missing_token_is_401(self, app_client, method, path):
        response = await getattr(app_client, method)(path)

        assert response.status_code == 401
        assert response.json()["error"] is True

    @pytest.mark.asyncio
    async def test_expired_token_is_401(self, app_client, db_founder_user):
        token = make_token(db_founder_user.id, expires_in=timedelta(minutes=-5))

        response = await app_client.get("/matches", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user_is_401(self, app_client):
        token = make_token(uuid.uuid4())

        response = await app_client.get("/matches", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestMatchesEndpoint:
    """Tests for GET /matches."""

    @pytest.mark.asyncio
    async def test_no_founder_profile_returns_empty(self, app_client, db_founder_user, mock_oracle):
        response = await app_client.get("/matches", headers=auth_headers(db_founder_user))

        assert response.status_code == 200
        assert response.json() == {"matches": []}
        mock_oracle.rank.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ranked_matches(self, app_client, async_session, db_founder_user, db_founder_profile, mock_oracle):
        vc_a = await create_vc(async_session, slug="vc-a", sectors=["Fintech", "B2B SaaS"])
        await create_vc(async_session, slug="vc-b", sectors=["Healthtech & Digital Health"])
        vc_c = await create_vc(async_session, slug="vc-c", sectors=["Fintech"])
        mock_oracle.rank.return_value = [
            CandidateScore(vc_id=str(vc_a.id), score=72, reason="Generic fit"),
            CandidateScore(vc_id=str(vc_c.id), score=91, reason="Thesis match"),
        ]

        response = await app_client.get("/matches", headers=auth_headers(db_founder_user))

        assert response.status_code == 200
        matches = response.json()["matches"]
        assert [m["slug"] for m in matches] == ["vc-c", "vc-a"]
        assert matches[0]["score"] == 91
        assert matches[0]["rationale"] == "Thesis match"
        assert matches[0]["firmName"] == vc_c.firm_name
        assert matches[0]["sectors"] == ["Fintech"]

    @pytest.mark.asyncio
    async def test_oracle_failure_degrades_to_uniform_scores(
        self, app_client, async_session, db_founder_user, db_founder_profile, mock_oracle
    ):
        await create_vc(async_session, slug="vc-a", sectors=["Fintech"])
        await create_vc(async_session, slug="vc-b", sectors=["Fintech"])
        mock_oracle.rank.side_effect = RankingOracleError("timeout")

        response = await app_client.get("/matches", headers=auth_headers(db_founder_user))

        assert response.status_code == 200
        matches = response.json()["matches"]
        assert [m["slug"] for m in matches] == ["vc-a", "vc-b"]
        assert all(m["score"] == 70 for m in matches)
        assert all(m["rationale"] == FALLBACK_RATIONALE for m in matches)


class TestFounderProfileEndpoints:
    """Tests for POST/GET /profile."""

    @pytest.mark.asyncio
    async def test_submit_json_then_read_back(self, app_client, db_founder_user, mock_oracle):
        mock_oracle.analyze_deck.return_value = DeckAnalysis(
            strengths=["Team"], weaknesses=["Market"], viability_score=66, summary="Take the meeting."
        )
        body = {
            "startupName": "Ledgerly",
            "sector": "Fintech",
            "askAmount": 500000,
            "deckLink": "https://decks.example.com/ledgerly.pdf",
        }

        with patch("funnel.services.founder_profile.fetch_deck", new=AsyncMock(return_value=b"%PDF")), patch(
            "funnel.services.founder_profile.extract_deck_text",
            return_value=ExtractedDeck(full_text="Ledgerly deck", pages=8),
        ):
            response = await app_client.post("/profile", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 201
        created = response.json()
        assert created["analyzed"] is True
        assert "profileId" in created

        response = await app_client.get("/profile", headers=auth_headers(db_founder_user))

        assert response.status_code == 200
        profile = response.json()
        assert profile["startupName"] == "Ledgerly"
        assert profile["askAmount"] == 500000
        assert profile["deckPages"] == 8
        assert profile["generalAnalysis"]["viabilityScore"] == 66
        assert "deckText" not in profile

    @pytest.mark.asyncio
    async def test_invalid_ask_amount(self, app_client, db_founder_user):
        body = {
            "startupName": "Ledgerly",
            "sector": "Fintech",
            "askAmount": 0,
            "deckLink": "https://decks.example.com/ledgerly.pdf",
        }

        response = await app_client.post("/profile", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 400
        fields = [item["field"] for item in response.json()["message"]]
        assert fields == ["askAmount"]

    @pytest.mark.asyncio
    async def test_unknown_sector(self, app_client, db_founder_user):
        body = {
            "startupName": "Ledgerly",
            "sector": "Underwater Basket Weaving",
            "askAmount": 500000,
            "deckLink": "https://decks.example.com/ledgerly.pdf",
        }

        response = await app_client.post("/profile", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 400
        assert response.json()["message"][0]["field"] == "sector"

    @pytest.mark.asyncio
    async def test_ask_amount_above_column_range(self, app_client, db_founder_user):
        body = {
            "startupName": "Ledgerly",
            "sector": "Fintech",
            "askAmount": 3_000_000_000,
            "deckLink": "https://decks.example.com/ledgerly.pdf",
        }

        response = await app_client.post("/profile", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 400
        assert [item["field"] for item in response.json()["message"]] == ["askAmount"]

    @pytest.mark.asyncio
    async def test_multipart_with_unreadable_pdf(self, app_client, db_founder_user, mock_oracle):
        # A failed request rolls the session back and expires loaded rows
        headers = auth_headers(db_founder_user)

        response = await app_client.post(
            "/profile",
            data={"startupName": "Ledgerly", "sector": "Fintech", "askAmount": "500000"},
            files={"file": ("deck.pdf", b"not really a pdf", "application/pdf")},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Failed to process pitch deck PDF."
        mock_oracle.analyze_deck.assert_not_awaited()

        response = await app_client.get("/profile", headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_without_profile_is_404(self, app_client, db_founder_user):
        response = await app_client.get("/profile", headers=auth_headers(db_founder_user))

        assert response.status_code == 404


class TestVCEndpoints:
    """Tests for /vc routes."""

    @pytest.mark.asyncio
    async def test_create_then_public_read(self, app_client, db_vc_user):
        body = {
            "firmName": "Northbeam Capital",
            "thesis": "Seed fintech infrastructure.",
            "sectors": ["Fintech", "B2B SaaS", "Fintech"],
            "minCheck": 100000,
            "maxCheck": 1000000,
            "slug": "northbeam",
        }

        response = await app_client.post("/vc/profile", json=body, headers=auth_headers(db_vc_user))

        assert response.status_code == 201
        assert response.json() == {"slug": "northbeam"}

        response = await app_client.get("/vc/northbeam")

        assert response.status_code == 200
        page = response.json()
        assert page["firmName"] == "Northbeam Capital"
        assert page["sectors"] == ["Fintech", "B2B SaaS"]
        assert page["minCheck"] == 100000

    @pytest.mark.asyncio
    async def test_max_below_min_rejected(self, app_client, db_vc_user):
        body = {
            "firmName": "Northbeam Capital",
            "thesis": "Seed fintech infrastructure.",
            "sectors": ["Fintech"],
            "minCheck": 500000,
            "maxCheck": 100000,
            "slug": "northbeam",
        }

        response = await app_client.post("/vc/profile", json=body, headers=auth_headers(db_vc_user))

        assert response.status_code == 400
        assert response.json()["message"] == [
            {
                "field": "maxCheck",
                "message": "Maximum check size must be greater than or equal to minimum check size",
            }
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_check", [3_000_000_000, 10**20])
    async def test_check_size_above_column_range(self, app_client, db_vc_user, max_check):
        headers = auth_headers(db_vc_user)
        body = {
            "firmName": "Northbeam Capital",
            "thesis": "Seed fintech infrastructure.",
            "sectors": ["Fintech"],
            "minCheck": 100000,
            "maxCheck": max_check,
            "slug": "northbeam",
        }

        response = await app_client.post("/vc/profile", json=body, headers=headers)

        assert response.status_code == 400
        assert [item["field"] for item in response.json()["message"]] == ["maxCheck"]

        response = await app_client.get("/vc/northbeam")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_taken_slug_conflicts(self, app_client, async_session, db_vc_user):
        await create_vc(async_session, slug="northbeam")
        body = {
            "firmName": "Northbeam Capital",
            "thesis": "Seed fintech infrastructure.",
            "sectors": ["Fintech"],
            "minCheck": 100000,
            "maxCheck": 1000000,
            "slug": "northbeam",
        }

        response = await app_client.post("/vc/profile", json=body, headers=auth_headers(db_vc_user))

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_slug_is_404(self, app_client):
        response = await app_client.get("/vc/nobody-here")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_sectors_render_empty(self, app_client, async_session):
        await create_vc(async_session, slug="legacy-vc", sectors="Fintech; SaaS")

        response = await app_client.get("/vc/legacy-vc")

        assert response.status_code == 200
        assert response.json()["sectors"] == []


class TestPitchEndpoint:
    """Tests for POST /pitch."""

    @pytest.mark.asyncio
    async def test_match_queues_crm(self, app_client, db_founder_user, db_founder_profile, db_vc_profile, mock_oracle, mock_notifier):
        mock_oracle.judge_pitch.return_value = PitchVerdict(
            is_match=True,
            memo="Strong thesis fit.",
            analysis=PitchAnalysis(strengths=["Team"], weaknesses=[]),
        )
        body = {"vcId": str(db_vc_profile.id), "deckLink": "https://decks.example.com/ledgerly.pdf"}

        response = await app_client.post("/pitch", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 200
        decision = response.json()
        assert decision["isMatch"] is True
        assert decision["vcId"] == str(db_vc_profile.id)
        assert decision["crmSyncRequested"] is True
        assert decision["analysis"]["strengths"] == ["Team"]
        mock_notifier.notify_match.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_deck_content_is_400(self, app_client, async_session, db_founder_user, db_vc_profile, mock_oracle):
        founder = FounderProfileFactory.create(user_id=db_founder_user.id, deck_text=None)
        async_session.add(founder)
        await async_session.commit()
        body = {"vcId": str(db_vc_profile.id), "deckLink": "https://decks.example.com/ledgerly.pdf"}

        response = await app_client.post("/pitch", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 400
        assert response.json()["message"] == NO_CONTENT_MESSAGE
        mock_oracle.judge_pitch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_vc_is_404(self, app_client, db_founder_user, db_founder_profile):
        body = {"vcId": str(uuid.uuid4()), "deckLink": "https://decks.example.com/ledgerly.pdf"}

        response = await app_client.post("/pitch", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_oracle_failure_is_502(self, app_client, db_founder_user, db_founder_profile, db_vc_profile, mock_oracle):
        mock_oracle.judge_pitch.side_effect = RankingOracleError("timeout")
        body = {"vcId": str(db_vc_profile.id), "deckLink": "https://decks.example.com/ledgerly.pdf"}

        response = await app_client.post("/pitch", json=body, headers=auth_headers(db_founder_user))

        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_missing_vc_id_is_400(self, app_client, db_founder_user):
        response = await app_client.post(
            "/pitch",
            json={"deckLink": "https://decks.example.com/ledgerly.pdf"},
            headers=auth_headers(db_founder_user),
        )

        assert response.status_code == 400
        assert response.json()["message"][0]["field"] == "vcId"
