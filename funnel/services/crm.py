"""
CRM Notification Service
Pushes accepted pitches to the VC's Monday.com board.

The workflow hands a notification to a CRMNotifier and moves on. The
default notifier enqueues a Celery task; delivery is at most once.
"""
import json
import logging
from typing import Any, Optional, Protocol

import httpx

from funnel.core.config import settings

logger = logging.getLogger(__name__)


CREATE_ITEM_MUTATION = """
mutation ($boardId: ID!, $itemName: String!, $columnValues: JSON) {
  create_item(board_id: $boardId, item_name: $itemName, column_values: $columnValues) {
    id
  }
}
"""


class MondayAPIError(Exception):
    """Monday.com rejected a request or was unreachable."""


class CRMNotifier(Protocol):
    """Sink for accepted-pitch notifications."""

    def notify_match(self, vc: Any, founder: Any, deck_link: Optional[str] = None) -> None:
        """Hand off one notification naming the VC and founder. Must not block on delivery."""
        ...


def build_crm_payload(vc: Any, founder: Any, deck_link: Optional[str] = None) -> dict[str, Any]:
    """Everything the worker needs, so it never reads the database."""
    return {
        "vc_id": str(vc.id),
        "board_id": vc.monday_board_id,
        "founder_id": str(founder.id),
        "startup_name": founder.startup_name,
        "sector": founder.sector,
        "ask_amount": founder.ask_amount,
        "deck_link": deck_link or founder.deck_link,
    }


class CeleryCRMNotifier:
    """Notifier that enqueues ``sync_pitch_to_crm``."""

    def notify_match(self, vc: Any, founder: Any, deck_link: Optional[str] = None) -> None:
        from funnel.tasks.crm import sync_pitch_to_crm

        sync_pitch_to_crm.delay(build_crm_payload(vc, founder, deck_link))
        logger.info(f"Queued CRM sync for VC {vc.id} and founder {founder.id}")


class MondayClient:
    """Minimal Monday.com GraphQL client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.monday_api_key
        self.api_url = api_url or settings.monday_api_url
        self.timeout = timeout or settings.monday_timeout_seconds
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
            "API-Version": "2024-01",
        }
        try:
            if self._http_client is not None:
                response = self._http_client.post(self.api_url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise MondayAPIError(f"Monday.com request failed: {e}") from e
        except ValueError as e:
            raise MondayAPIError("Monday.com returned invalid JSON") from e

        if body.get("errors"):
            raise MondayAPIError(f"Monday.com returned errors: {body['errors']}")
        return body.get("data") or {}

    def create_item(
        self,
        board_id: str,
        item_name: str,
        column_values: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Create one item on a board.

        Args:
            board_id: Target board.
            item_name: Item title.
            column_values: Column id to value mapping.

        Returns:
            The new item's id.

        Raises:
            MondayAPIError: On transport failure or an error response.
        """
        if not self.is_configured:
            raise MondayAPIError("MONDAY_API_KEY is not configured")

        data = self._post(
            {
                "query": CREATE_ITEM_MUTATION,
                "variables": {
                    "boardId": str(board_id),
                    "itemName": item_name,
                    "columnValues": json.dumps(column_values or {}),
                },
            }
        )
        item = data.get("create_item") or {}
        if "id" not in item:
            raise MondayAPIError("Monday.com response missing item id")
        return str(item["id"])
