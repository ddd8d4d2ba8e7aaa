"""
Pitch API Endpoints
Submit the caller's startup to one VC.
"""

from fastapi import APIRouter

from funnel.api.deps import CurrentContext, NotifierDep, OracleDep, ProfileStoreDep
from funnel.schemas.pitch import PitchDecision, PitchRequest
from funnel.services.pitch import PitchWorkflow

router = APIRouter(prefix="/pitch", tags=["Pitch"])


@router.post(
    "",
    response_model=PitchDecision,
    summary="Pitch a VC",
    description="Judge fit with one VC's thesis; accepted pitches are sent to the VC's CRM.",
)
async def submit_pitch(
    request: PitchRequest,
    ctx: CurrentContext,
    store: ProfileStoreDep,
    oracle: OracleDep,
    notifier: NotifierDep,
) -> PitchDecision:
    workflow = PitchWorkflow(store, oracle, notifier)
    return await workflow.submit_pitch(ctx, request.vc_id, str(request.deck_link))
