"""
Founder Profile API Endpoints
Submit and read the caller's founder profile.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request, status
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from funnel.api.deps import CurrentContext, OracleDep, ProfileStoreDep
from funnel.core.exceptions import ValidationError, format_validation_errors
from funnel.schemas.profile import FounderProfileCreate, FounderProfileResponse, ProfileSubmitted
from funnel.services.founder_profile import FounderProfileService, upload_link

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


def _parse_submission(raw: Any) -> FounderProfileCreate:
    try:
        return FounderProfileCreate.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e.errors()))


@router.post(
    "",
    response_model=ProfileSubmitted,
    status_code=status.HTTP_201_CREATED,
    summary="Submit founder profile",
    description="JSON body with deckLink, or multipart form with a PDF in 'file'.",
)
async def submit_profile(
    request: Request,
    ctx: CurrentContext,
    store: ProfileStoreDep,
    oracle: OracleDep,
) -> ProfileSubmitted:
    """
    Create or replace the caller's founder profile.

    The deck text is extracted before anything is stored; extraction
    failures abort the submission.
    """
    content_type = request.headers.get("content-type", "")
    deck_content = None

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise ValidationError([{"field": "file", "message": "No file uploaded"}])

        data = _parse_submission(
            {
                "startupName": form.get("startupName"),
                "sector": form.get("sector"),
                "askAmount": form.get("askAmount"),
                "deckLink": upload_link(upload.filename or ""),
            }
        )
        deck_content = await upload.read()
    else:
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError([{"field": "body", "message": "Request body must be valid JSON"}])
        if not isinstance(body, dict):
            raise ValidationError([{"field": "body", "message": "Request body must be a JSON object"}])
        data = _parse_submission(body)

    profile = await FounderProfileService(store, oracle).submit(ctx, data, deck_content)

    return ProfileSubmitted(
        message="Founder profile created successfully",
        profile_id=profile.id,
        analyzed=profile.general_analysis is not None,
    )


@router.get(
    "",
    response_model=FounderProfileResponse,
    summary="Get founder profile",
)
async def get_profile(ctx: CurrentContext, store: ProfileStoreDep) -> FounderProfileResponse:
    """Get the caller's founder profile."""
    profile = await store.get_founder_profile(ctx, ctx.user_id)
    return FounderProfileResponse.model_validate(profile)
