"""Authorization code flow against the identity provider."""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from oidcgate.core.errors import TokenExchangeFailedError, TokenExchangeRejectedError
from oidcgate.core.settings import AuthSettings
from oidcgate.crypto.certs import load_signing_key_pem
from oidcgate.crypto.jwt_validator import validate_id_token
from oidcgate.db.kv_store import KeyValueStore
from oidcgate.db.repo_session import SessionManager
from oidcgate.db.repo_user import UserDirectory
from oidcgate.oidc.types import EstablishedLogin, TokenRequest, TokenResponse

logger = logging.getLogger(__name__)

HTTP_CLIENT_ERROR_MIN = 400
HTTP_SERVER_ERROR_MIN = 500


class OAuthFlowController:
    """Builds the authorize redirect and turns a callback code into a session."""

    def __init__(
        self,
        settings: AuthSettings,
        store: KeyValueStore,
        client: httpx.AsyncClient,
        users: UserDirectory | None = None,
        sessions: SessionManager | None = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._client = client
        self._users = users or UserDirectory(store)
        self._sessions = sessions or SessionManager(store, self._users)

    @property
    def token_endpoint(self) -> str:
        return f"https://{self._settings.domain}/oauth/token"

    def authorize_url(self, state: str) -> str:
        """URL of the provider's authorize endpoint for this login attempt."""
        s = self._settings
        return (
            f"https://{s.domain}/authorize?response_type=code"
            f"&client_id={quote(s.client_id, safe='')}"
            f"&redirect_uri={quote(s.redirect_uri, safe='')}"
            f"&scope={quote(s.scope, safe='')}"
            f"&state={quote(state, safe='')}"
        )

    def token_request(self, code: str) -> TokenRequest:
        s = self._settings
        return TokenRequest(
            client_id=s.client_id,
            client_secret=s.client_secret,
            code=code,
            redirect_uri=s.redirect_uri,
        )

    async def exchange_code(self, code: str) -> TokenResponse:
        """POST the code to the token endpoint. No retry on failure."""
        body = self.token_request(code).model_dump_json().encode()
        try:
            resp = await self._client.post(
                self.token_endpoint,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise TokenExchangeFailedError(f"transport error: {exc}") from exc

        if HTTP_CLIENT_ERROR_MIN <= resp.status_code < HTTP_SERVER_ERROR_MIN:
            raise TokenExchangeRejectedError(resp.status_code)
        if resp.status_code >= HTTP_SERVER_ERROR_MIN:
            raise TokenExchangeFailedError(f"status={resp.status_code}")
        try:
            return TokenResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise TokenExchangeFailedError("undecodable token response") from exc

    async def complete_login(self, code: str) -> EstablishedLogin:
        """Exchange, validate, then persist the user and session.

        Nothing is written to the store unless the ID token validates.
        """
        tokens = await self.exchange_code(code)
        signing_key = await load_signing_key_pem(self._store)
        payload = validate_id_token(
            signing_key,
            tokens.id_token,
            audience=self._settings.client_id,
            domain=self._settings.domain,
        )
        user = await self._users.get_or_create(payload.user_id, payload.email)
        session_key = await self._sessions.create(
            user.user_id, payload.exp, tokens.id_token.encode()
        )
        return EstablishedLogin(session_key=session_key, user=user, payload=payload)
