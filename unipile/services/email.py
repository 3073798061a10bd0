from typing import Any, Dict, Iterable, List, Optional

from ..models import PaginatedResponse
from ..utils import compact
from .base import AddressLike, AttachmentLike, BaseService, serialize_addresses, serialize_attachments

EMAILS_PATH = "/api/v1/emails"


class EmailService(BaseService):
    """Sending, reading, tracking and organizing emails"""

    async def list(
        self,
        account_id: str,
        folder: Optional[str] = None,
        is_read: Optional[bool] = None,
        is_starred: Optional[bool] = None,
        query: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse:
        response = await self._http.get(
            EMAILS_PATH,
            {
                'account_id': account_id,
                'folder': folder,
                'is_read': is_read,
                'is_starred': is_starred,
                'query': query,
                'date_from': date_from,
                'date_to': date_to,
                'limit': limit,
                'cursor': cursor,
            },
            account_id,
        )
        return self._page(response.data, 'emails')

    async def get(self, email_id: str, account_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{EMAILS_PATH}/{email_id}", {'account_id': account_id}, account_id)
        return response.data

    async def send(
        self,
        account_id: str,
        to: Iterable[AddressLike],
        subject: str,
        body: Optional[str] = None,
        body_html: Optional[str] = None,
        cc: Optional[Iterable[AddressLike]] = None,
        bcc: Optional[Iterable[AddressLike]] = None,
        attachments: Optional[Iterable[AttachmentLike]] = None,
        reply_to: Optional[str] = None,
        tracking: Optional[Dict[str, Any]] = None,
        scheduled_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email.

        Args:
            account_id: Sending account
            to: Recipients, as EmailAddress models or {"email", "name"} dicts
            subject: Subject line
            body: Plain text body
            body_html: HTML body
            cc: Carbon copy recipients
            bcc: Blind carbon copy recipients
            attachments: Files to attach
            reply_to: Id of the email this one replies to
            tracking: Open/click tracking options
            scheduled_at: ISO 8601 send time
        """
        response = await self._http.post(
            EMAILS_PATH,
            compact(
                account_id=account_id,
                to=serialize_addresses(to),
                subject=subject,
                body=body,
                body_html=body_html,
                cc=serialize_addresses(cc),
                bcc=serialize_addresses(bcc),
                attachments=serialize_attachments(attachments),
                reply_to=reply_to,
                tracking=tracking,
                scheduled_at=scheduled_at,
            ),
            account_id,
        )
        return response.data

    async def update(
        self,
        email_id: str,
        account_id: str,
        is_read: Optional[bool] = None,
        is_starred: Optional[bool] = None,
        folder: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.patch(
            f"{EMAILS_PATH}/{email_id}",
            compact(account_id=account_id, is_read=is_read, is_starred=is_starred, folder=folder),
            account_id,
        )
        return response.data

    async def delete(self, email_id: str, account_id: str) -> None:
        await self._http.delete(f"{EMAILS_PATH}/{email_id}", account_id, params={'account_id': account_id})

    async def list_folders(self, account_id: str) -> List[Dict[str, Any]]:
        response = await self._http.get(f"{EMAILS_PATH}/folders", {'account_id': account_id}, account_id)
        return self._list(response.data, 'folders')

    async def create_draft(
        self,
        account_id: str,
        to: Optional[Iterable[AddressLike]] = None,
        subject: Optional[str] = None,
        body: Optional[str] = None,
        body_html: Optional[str] = None,
        cc: Optional[Iterable[AddressLike]] = None,
        bcc: Optional[Iterable[AddressLike]] = None,
        attachments: Optional[Iterable[AttachmentLike]] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            f"{EMAILS_PATH}/drafts",
            compact(
                account_id=account_id,
                to=serialize_addresses(to),
                subject=subject,
                body=body,
                body_html=body_html,
                cc=serialize_addresses(cc),
                bcc=serialize_addresses(bcc),
                attachments=serialize_attachments(attachments),
            ),
            account_id,
        )
        return response.data

    async def mark_as_read(self, email_id: str, account_id: str) -> Dict[str, Any]:
        return await self.update(email_id, account_id, is_read=True)

    async def mark_as_unread(self, email_id: str, account_id: str) -> Dict[str, Any]:
        return await self.update(email_id, account_id, is_read=False)

    async def star(self, email_id: str, account_id: str) -> Dict[str, Any]:
        return await self.update(email_id, account_id, is_starred=True)

    async def unstar(self, email_id: str, account_id: str) -> Dict[str, Any]:
        return await self.update(email_id, account_id, is_starred=False)

    async def move_to_folder(self, email_id: str, account_id: str, folder: str) -> Dict[str, Any]:
        return await self.update(email_id, account_id, folder=folder)

    async def reply(self, original_email_id: str, **send_fields: Any) -> Dict[str, Any]:
        """Send a threaded reply; takes the same keyword arguments as :meth:`send` except reply_to"""
        send_fields.pop('reply_to', None)
        return await self.send(reply_to=original_email_id, **send_fields)
