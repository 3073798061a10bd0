from typing import Any, Iterable, List, Optional, Union

from ..http_client import HttpClient
from ..models import AttachmentUpload, EmailAddress, PaginatedResponse

AddressLike = Union[EmailAddress, dict]
AttachmentLike = Union[AttachmentUpload, dict]


class BaseService:
    """Shared plumbing for the API service facades"""

    def __init__(self, http_client: HttpClient):
        self._http = http_client

    @staticmethod
    def _first_present(data: Any, *keys: str) -> Any:
        """Value of the first key present with a non-None value in a response dict"""
        if not isinstance(data, dict):
            return None
        for key in keys:
            if data.get(key) is not None:
                return data[key]
        return None

    def _page(self, data: Any, *item_keys: str) -> PaginatedResponse:
        """Normalize the API's list envelopes (items/<resource>, cursor/next_cursor)"""
        return PaginatedResponse(
            items=self._first_present(data, 'items', *item_keys) or [],
            cursor=self._first_present(data, 'cursor', 'next_cursor'),
            total=self._first_present(data, 'total'),
        )

    def _list(self, data: Any, *item_keys: str) -> List[Any]:
        return self._first_present(data, 'items', *item_keys) or []


def serialize_addresses(addresses: Optional[Iterable[AddressLike]]) -> Optional[List[dict]]:
    if addresses is None:
        return None
    return [EmailAddress.model_validate(address).model_dump(exclude_none=True) for address in addresses]


def serialize_attachments(attachments: Optional[Iterable[AttachmentLike]]) -> Optional[List[dict]]:
    if attachments is None:
        return None
    return [AttachmentUpload.model_validate(attachment).model_dump() for attachment in attachments]
