from typing import Any, Dict, Optional, Union

from ..enums import AccountProvider, CheckpointType
from ..models import PaginatedResponse
from ..utils import compact
from .base import BaseService

ACCOUNTS_PATH = "/api/v1/accounts"


class AccountService(BaseService):
    """
    Account connections, authentication flows and lifecycle operations.

    Connect calls return either the connected account or a checkpoint the user
    has to resolve (OTP, CAPTCHA, ...). Use :meth:`is_checkpoint` to tell them apart.
    """

    async def list(self, limit: Optional[int] = None, cursor: Optional[str] = None) -> PaginatedResponse:
        response = await self._http.get(ACCOUNTS_PATH, {'limit': limit, 'cursor': cursor})
        return self._page(response.data, 'accounts')

    async def get(self, account_id: str) -> Dict[str, Any]:
        response = await self._http.get(f"{ACCOUNTS_PATH}/{account_id}")
        return response.data

    async def connect_oauth(
        self, provider: Union[AccountProvider, str], code: str, redirect_uri: Optional[str] = None
    ) -> Dict[str, Any]:
        response = await self._http.post(
            ACCOUNTS_PATH,
            compact(provider=provider, code=code, redirect_uri=redirect_uri),
        )
        return response.data

    async def connect_credentials(
        self, provider: Union[AccountProvider, str], username: str, password: str
    ) -> Dict[str, Any]:
        response = await self._http.post(
            ACCOUNTS_PATH,
            compact(provider=provider, username=username, password=password),
        )
        return response.data

    async def connect_cookies(self, provider: Union[AccountProvider, str], cookies: Any) -> Dict[str, Any]:
        response = await self._http.post(ACCOUNTS_PATH, compact(provider=provider, cookies=cookies))
        return response.data

    async def connect_qr_code(self, provider: Union[AccountProvider, str]) -> Dict[str, Any]:
        """Start a QR code connection (e.g. WhatsApp); returns the checkpoint holding the code"""
        response = await self._http.post(
            ACCOUNTS_PATH, {'provider': provider, 'connection_type': 'qr_code'}
        )
        return response.data

    async def connect_imap(
        self,
        email: str,
        password: str,
        imap_host: str,
        imap_port: int,
        smtp_host: str,
        smtp_port: int,
        use_ssl: bool = True,
        provider: Union[AccountProvider, str] = AccountProvider.IMAP,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            ACCOUNTS_PATH,
            compact(
                provider=provider,
                imap_host=imap_host,
                imap_port=imap_port,
                smtp_host=smtp_host,
                smtp_port=smtp_port,
                email=email,
                password=password,
                use_ssl=use_ssl,
            ),
        )
        return response.data

    async def resolve_checkpoint(
        self,
        account_id: str,
        type: Union[CheckpointType, str],
        code: Optional[str] = None,
        captcha_solution: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            f"{ACCOUNTS_PATH}/{account_id}/checkpoint",
            compact(type=type, code=code, captcha_solution=captcha_solution),
        )
        return response.data

    async def create_hosted_auth_link(
        self,
        provider: Union[AccountProvider, str],
        callback_url: Optional[str] = None,
        expires_in: Optional[int] = None,
        state: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._http.post(
            "/api/v1/hosted/accounts/link",
            compact(provider=provider, callback_url=callback_url, expires_in=expires_in, state=state),
        )
        return response.data

    async def reconnect(self, account_id: str) -> Dict[str, Any]:
        response = await self._http.post(f"{ACCOUNTS_PATH}/{account_id}/reconnect")
        return response.data

    async def delete(self, account_id: str) -> None:
        await self._http.delete(f"{ACCOUNTS_PATH}/{account_id}")

    async def resync(self, account_id: str) -> None:
        """Resynchronize a messaging account's data"""
        await self._http.post(f"{ACCOUNTS_PATH}/{account_id}/resync", account_id=account_id)

    @staticmethod
    def is_checkpoint(response: Dict[str, Any]) -> bool:
        """True if a connect response is a checkpoint rather than an account"""
        return 'type' in response and 'message' in response and 'status' not in response
