import json
from typing import Any, Dict, List, Optional, Union

from ..enums import WebhookEvent, WebhookSource
from ..models import PaginatedResponse
from ..utils import compact
from .base import BaseService

WEBHOOKS_PATH = "/api/v1/webhooks"


class WebhookService(BaseService):
    """Webhook registration for real-time events"""

    async def list(self, limit: Optional[int] = None, cursor: Optional[str] = None) -> PaginatedResponse:
        response = await self._http.get(WEBHOOKS_PATH, {'limit': limit, 'cursor': cursor})
        page = self._page(response.data, 'webhooks')
        # Webhook listings carry no total
        page.total = None
        return page

    async def get(self, webhook_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{WEBHOOKS_PATH}/{webhook_id}")
        return response.data

    async def create(
        self,
        url: str,
        source: Union[WebhookSource, str],
        events: Optional[List[Union[WebhookEvent, str]]] = None,
        headers: Optional[Dict[str, str]] = None,
        account_ids: Optional[List[str]] = None,
        secret: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            WEBHOOKS_PATH,
            compact(
                url=url,
                source=source,
                events=events,
                headers=headers,
                account_ids=account_ids,
                secret=secret,
            ),
        )
        return response.data

    async def delete(self, webhook_id: str) -> None:
        await self._http.delete(f"{WEBHOOKS_PATH}/{webhook_id}")

    @staticmethod
    def parse_payload(body: Union[str, bytes]) -> Dict[str, Any]:
        """Decode a webhook delivery's raw JSON body"""
        return json.loads(body)

    async def create_messaging_webhook(
        self, url: str, account_ids: Optional[List[str]] = None, secret: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.create(
            url, WebhookSource.MESSAGING, [WebhookEvent.MESSAGE_RECEIVED], account_ids=account_ids, secret=secret
        )

    async def create_email_webhook(
        self, url: str, account_ids: Optional[List[str]] = None, secret: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.create(
            url, WebhookSource.EMAIL, [WebhookEvent.MAIL_SENT], account_ids=account_ids, secret=secret
        )

    async def create_email_tracking_webhook(
        self, url: str, account_ids: Optional[List[str]] = None, secret: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.create(
            url,
            WebhookSource.EMAIL_TRACKING,
            [WebhookEvent.MAIL_OPENED, WebhookEvent.LINK_CLICKED],
            account_ids=account_ids,
            secret=secret,
        )

    async def create_account_status_webhook(
        self, url: str, account_ids: Optional[List[str]] = None, secret: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.create(
            url,
            WebhookSource.ACCOUNT_STATUS,
            [WebhookEvent.ACCOUNT_STATUS_CHANGED],
            account_ids=account_ids,
            secret=secret,
        )
