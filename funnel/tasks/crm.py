"""
Funnel.vc CRM Tasks
Celery task delivering accepted pitches to Monday.com.
"""
import logging

from funnel.celery_app import celery_app
from funnel.services.crm import MondayAPIError, MondayClient

logger = logging.getLogger(__name__)


@celery_app.task(queue="crm", max_retries=0, acks_late=False, ignore_result=True)
def sync_pitch_to_crm(payload: dict) -> dict:
    """
    Create a Monday.com item for an accepted pitch.

    Single attempt. A failure is logged and the notification is lost.

    Args:
        payload: Output of ``build_crm_payload``.

    Returns:
        Dictionary describing the outcome.
    """
    vc_id = payload.get("vc_id")
    board_id = payload.get("board_id")

    if not board_id:
        logger.info(f"VC {vc_id} has no Monday board; skipping CRM sync")
        return {"status": "skipped", "reason": "no_board"}

    client = MondayClient()
    if not client.is_configured:
        logger.warning(f"Monday API key not configured; dropping CRM sync for VC {vc_id}")
        return {"status": "skipped", "reason": "not_configured"}

    try:
        item_id = client.create_item(
            board_id=board_id,
            item_name=payload.get("startup_name") or "New pitch",
            column_values={
                "text": payload.get("sector") or "",
                "numbers": payload.get("ask_amount"),
                "link": {"url": payload.get("deck_link") or "", "text": "Pitch deck"},
            },
        )
    except MondayAPIError as e:
        logger.error(f"CRM sync failed for VC {vc_id}, founder {payload.get('founder_id')}: {e}")
        return {"status": "failed", "error": str(e)}

    logger.info(f"Created Monday item {item_id} on board {board_id} for VC {vc_id}")
    return {"status": "created", "item_id": item_id}
