"""Firebase Cloud Messaging HTTP v1 client.

FCM v1 has no multicast endpoint, so a multicast send is one
`messages:send` request per token. Per-token failures are reported in the
BatchResponse rather than raised.
"""

import logging
from collections.abc import Callable

import google.auth
import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from floodcheck.config.schema import FCM_BASE_URL
from floodcheck.errors import NotificationDeliveryFailure
from floodcheck.models.notification import BatchResponse, PushMessage, SendResponse

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


class FcmClient:
    def __init__(
        self,
        project_id: str,
        credentials_file: str | None = None,
        base_url: str = FCM_BASE_URL,
        timeout: float = 30.0,
        token_provider: Callable[[], str] | None = None,
    ):
        self.project_id = project_id
        self.credentials_file = credentials_file
        self.base_url = base_url
        self.timeout = timeout
        self._token_provider = token_provider
        self._credentials = None

    def _access_token(self) -> str:
        """OAuth2 bearer token for the messaging scope, refreshed when expired."""
        if self._token_provider is not None:
            return self._token_provider()
        try:
            if self._credentials is None:
                if self.credentials_file:
                    self._credentials = (
                        service_account.Credentials.from_service_account_file(
                            self.credentials_file, scopes=[FCM_SCOPE]
                        )
                    )
                else:
                    self._credentials, _ = google.auth.default(scopes=[FCM_SCOPE])
            if not self._credentials.valid:
                self._credentials.refresh(Request())
            return self._credentials.token
        except (GoogleAuthError, OSError) as e:
            raise NotificationDeliveryFailure(f"FCM credentials unavailable: {e}") from e

    def _send_url(self) -> str:
        return f"{self.base_url}/v1/projects/{self.project_id}/messages:send"

    def send(self, token: str, message: PushMessage, access_token: str) -> SendResponse:
        """Send one message to one device token."""
        body = {
            "message": {
                "token": token,
                "notification": {"title": message.title, "body": message.body},
                "data": message.data,
            }
        }
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        try:
            resp = httpx.post(
                self._send_url(), json=body, headers=headers, timeout=self.timeout
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return SendResponse(token=token, success=False, error=f"Request failed: {e}")

        if resp.status_code >= 400:
            return SendResponse(
                token=token,
                success=False,
                error=f"HTTP {resp.status_code}: {resp.text}",
            )
        try:
            data = resp.json()
        except ValueError:
            data = None
        message_id = data.get("name") if isinstance(data, dict) else None
        return SendResponse(token=token, success=True, message_id=message_id)

    def send_each_for_multicast(self, message: PushMessage) -> BatchResponse:
        """Send a message to every token in `message.tokens`."""
        if not self.project_id:
            raise NotificationDeliveryFailure("FCM project id not set")
        access_token = self._access_token()

        responses = [self.send(t, message, access_token) for t in message.tokens]
        batch = BatchResponse(responses=responses)
        if batch.failure_count:
            logger.warning(
                "FCM delivered %d/%d, first error: %s",
                batch.success_count,
                len(responses),
                next(r.error for r in responses if not r.success),
            )
        return batch
