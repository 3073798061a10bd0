from typing import Any, Dict, Iterable, List, Optional

from ..models import PaginatedResponse
from ..utils import compact
from .base import AttachmentLike, BaseService, serialize_attachments

CHATS_PATH = "/api/v1/chats"
INMAIL_PATH = "/api/v1/linkedin/inmail"


class MessagingService(BaseService):
    """Chats and messages across every supported messaging provider, plus LinkedIn InMail"""

    async def list_chats(
        self,
        account_id: str,
        has_unread: Optional[bool] = None,
        include_archived: Optional[bool] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse:
        response = await self._http.get(
            CHATS_PATH,
            {
                'account_id': account_id,
                'has_unread': has_unread,
                'include_archived': include_archived,
                'limit': limit,
                'cursor': cursor,
            },
            account_id,
        )
        return self._page(response.data, 'chats')

    async def get_chat(self, chat_id: str, account_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{CHATS_PATH}/{chat_id}", {'account_id': account_id}, account_id)
        return response.data

    async def start_chat(
        self,
        account_id: str,
        attendee_ids: List[str],
        message: Optional[str] = None,
        attachments: Optional[Iterable[AttachmentLike]] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            CHATS_PATH,
            compact(
                account_id=account_id,
                attendee_ids=attendee_ids,
                message=message,
                attachments=serialize_attachments(attachments),
            ),
            account_id,
        )
        return response.data

    async def list_messages(
        self,
        chat_id: str,
        account_id: Optional[str] = None,
        before: Optional[str] = None,
        after: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse:
        response = await self._http.get(
            f"{CHATS_PATH}/{chat_id}/messages",
            {'before': before, 'after': after, 'limit': limit, 'cursor': cursor},
            account_id,
        )
        return self._page(response.data, 'messages')

    async def get_message(self, chat_id: str, message_id: str, account_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{CHATS_PATH}/{chat_id}/messages/{message_id}", account_id=account_id)
        return response.data

    async def send_message(
        self,
        chat_id: str,
        text: str,
        account_id: Optional[str] = None,
        attachments: Optional[Iterable[AttachmentLike]] = None,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            f"{CHATS_PATH}/{chat_id}/messages",
            compact(text=text, attachments=serialize_attachments(attachments), reply_to=reply_to),
            account_id,
        )
        return response.data

    async def list_attendees(self, chat_id: str, account_id: str) -> List[Dict[str, Any]]:
        response = await self._http.get(f"{CHATS_PATH}/{chat_id}/attendees", account_id=account_id)
        return self._list(response.data, 'attendees')

    async def get_attendee_picture(self, chat_id: str, attendee_id: str, account_id: str) -> Optional[str]:
        """URL of an attendee's profile picture"""
        response = await self._http.get(
            f"{CHATS_PATH}/{chat_id}/attendees/{attendee_id}/picture", account_id=account_id
        )
        return self._first_present(response.data, 'url')

    async def send_inmail(self, account_id: str, recipient_urn: str, subject: str, body: str) -> Dict[str, Any]:
        response = await self._http.post(
            INMAIL_PATH,
            {'account_id': account_id, 'recipient_urn': recipient_urn, 'subject': subject, 'body': body},
            account_id,
        )
        return response.data

    async def get_inmail_credits(self, account_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{INMAIL_PATH}/credits", {'account_id': account_id}, account_id)
        return response.data

    async def mark_chat_as_read(self, chat_id: str, account_id: str) -> None:
        await self._chat_action(chat_id, account_id, 'read')

    async def archive_chat(self, chat_id: str, account_id: str) -> None:
        await self._chat_action(chat_id, account_id, 'archive')

    async def unarchive_chat(self, chat_id: str, account_id: str) -> None:
        await self._chat_action(chat_id, account_id, 'unarchive')

    async def mute_chat(self, chat_id: str, account_id: str) -> None:
        await self._chat_action(chat_id, account_id, 'mute')

    async def unmute_chat(self, chat_id: str, account_id: str) -> None:
        await self._chat_action(chat_id, account_id, 'unmute')

    async def _chat_action(self, chat_id: str, account_id: str, action: str) -> None:
        await self._http.post(f"{CHATS_PATH}/{chat_id}/{action}", {'account_id': account_id}, account_id)

    async def add_reaction(self, chat_id: str, message_id: str, emoji: str) -> None:
        await self._http.post(f"{CHATS_PATH}/{chat_id}/messages/{message_id}/reactions", {'emoji': emoji})

    async def remove_reaction(self, chat_id: str, message_id: str, emoji: str) -> None:
        await self._http.delete(
            f"{CHATS_PATH}/{chat_id}/messages/{message_id}/reactions", params={'emoji': emoji}
        )

    async def forward_message(self, chat_id: str, message_id: str, target_chat_id: str) -> Dict[str, Any]:
        response = await self._http.post(
            f"{CHATS_PATH}/{chat_id}/messages/{message_id}/forward", {'target_chat_id': target_chat_id}
        )
        return response.data
