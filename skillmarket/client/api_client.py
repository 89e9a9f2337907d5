"""
HTTP client for the SkillMarket API.

Every call returns a result object; failures (HTTP errors and transport
errors alike) come back as a human-readable ``error`` string and are never
raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from skillmarket.client.context import AuthContext, ClientSession
from skillmarket.client.sequencing import RequestSequencer
from skillmarket.schemas import (
    AuthResponse,
    ProfileLookup,
    ProfileUpsert,
    RequestFilters,
    RequestPage,
    SearchFilters,
    SearchResponse,
    SessionInfo,
    StatusUpdateResult,
    SwapRequestCreate,
    SwapRequestResult,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the API's ``detail`` message."""
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None

    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        # FastAPI validation errors
        messages = [str(item.get("msg", "")) for item in detail if isinstance(item, dict)]
        messages = [m.removeprefix("Value error, ") for m in messages if m]
        if messages:
            return "; ".join(messages)
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class SkillMarketClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        http: Optional[httpx.Client] = None,
        context: Optional[AuthContext] = None,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=DEFAULT_TIMEOUT_SECONDS)
        self.context = context or AuthContext()
        self.search_sequencer = RequestSequencer()
        self.last_search: Optional[SearchResponse] = None

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "SkillMarketClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ======================
    # TRANSPORT
    # ======================

    def _headers(self) -> Dict[str, str]:
        token = self.context.access_token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _call(
        self,
        method: str,
        path: str,
        fallback_error: str,
        **kwargs: Any,
    ) -> Tuple[Optional[Any], Optional[str], Optional[int]]:
        """Returns ``(payload, error, status_code)``."""
        try:
            response = self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return None, fallback_error, None

        if response.is_error:
            return None, error_message(response), response.status_code
        try:
            return response.json(), None, response.status_code
        except ValueError:
            return None, fallback_error, response.status_code

    def _adopt_session(self, result: AuthResponse) -> AuthResponse:
        if result.access_token and result.user:
            self.context.set_session(ClientSession(
                user=result.user,
                access_token=result.access_token,
                expires_at=result.expires_at,
            ))
        return result

    # ======================
    # AUTH
    # ======================

    def sign_up(self, email: str, password: str, full_name: str) -> AuthResponse:
        payload, error, _ = self._call(
            "POST", "/auth/register",
            "An unexpected error occurred during signup",
            json={"email": email, "password": password, "full_name": full_name},
        )
        if error:
            return AuthResponse(error=error)
        return self._adopt_session(AuthResponse.model_validate(payload))

    def sign_in(self, email: str, password: str) -> AuthResponse:
        payload, error, _ = self._call(
            "POST", "/auth/login",
            "An unexpected error occurred during sign in",
            json={"email": email, "password": password},
        )
        if error:
            return AuthResponse(error=error)
        return self._adopt_session(AuthResponse.model_validate(payload))

    def sign_out(self) -> AuthResponse:
        if not self.context.is_authenticated:
            return AuthResponse()
        _, error, status_code = self._call("POST", "/auth/logout", "Failed to sign out")
        if error and status_code != 401:
            return AuthResponse(error=error)
        self.context.clear()
        return AuthResponse()

    def get_session(self) -> Optional[SessionInfo]:
        if not self.context.is_authenticated:
            return None
        payload, error, status_code = self._call("GET", "/auth/session", "Failed to fetch session")
        if status_code == 401:
            self.context.clear()
            return None
        if error:
            return None
        return SessionInfo.model_validate(payload)

    def resend_verification(self, email: str) -> AuthResponse:
        _, error, _ = self._call(
            "POST", "/auth/resend-verification",
            "Failed to resend verification email",
            json={"email": email},
        )
        return AuthResponse(error=error)

    def verify_email(self, token: str) -> AuthResponse:
        payload, error, _ = self._call(
            "GET", "/auth/callback",
            "Failed to verify email",
            params={"token": token},
        )
        if error:
            return AuthResponse(error=error)
        return self._adopt_session(AuthResponse.model_validate(payload))

    # ======================
    # PROFILES
    # ======================

    def get_my_profile(self) -> ProfileLookup:
        payload, error, _ = self._call("GET", "/profiles/me", "Failed to fetch user profile")
        if error:
            return ProfileLookup(error=error)
        return ProfileLookup.model_validate({"profile": payload})

    def save_profile(self, profile: ProfileUpsert) -> ProfileLookup:
        payload, error, _ = self._call(
            "PUT", "/profiles/me",
            "An unexpected error occurred. Please try again.",
            json=profile.model_dump(),
        )
        if error:
            return ProfileLookup(error=error)
        return ProfileLookup.model_validate({"profile": payload})

    # ======================
    # SEARCH
    # ======================

    def search(self, query: str, filters: Optional[SearchFilters] = None) -> Optional[SearchResponse]:
        """
        Run a skill search.

        Returns None when a newer search was started before this one
        completed; ``last_search`` then keeps the newer response.
        """
        ticket = self.search_sequencer.next_ticket()
        params: Dict[str, Any] = {"q": query}
        if filters:
            if filters.availability:
                params["availability"] = filters.availability
            if filters.location:
                params["location"] = filters.location
            if filters.profile_visibility:
                params["visibility"] = filters.profile_visibility

        payload, error, _ = self._call(
            "GET", "/search/users",
            "An unexpected error occurred while searching",
            params=params,
        )
        if error:
            response = SearchResponse(error=error)
        else:
            response = SearchResponse.model_validate(payload)

        if not self.search_sequencer.commit_if_latest(ticket, lambda: setattr(self, "last_search", response)):
            logger.debug("Dropping stale search response (ticket=%s)", ticket)
            return None
        return response

    # ======================
    # SKILL EXCHANGE REQUESTS
    # ======================

    def list_requests(
        self,
        filters: Optional[RequestFilters] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> RequestPage:
        params: Dict[str, Any] = {"page": page, "page_size": page_size}
        if filters:
            params.update(filters.model_dump(exclude_none=True))

        payload, error, _ = self._call(
            "GET", "/requests",
            "Failed to fetch skill exchange requests",
            params=params,
        )
        if error:
            return RequestPage(page=page, page_size=page_size, error=error)
        return RequestPage.model_validate(payload)

    def send_request(self, request: SwapRequestCreate) -> SwapRequestResult:
        payload, error, _ = self._call(
            "POST", "/requests",
            "Failed to send skill exchange request. Please try again.",
            json=request.model_dump(),
        )
        if error:
            return SwapRequestResult(error=error)
        return SwapRequestResult.model_validate({"request": payload})

    def respond_to_request(self, request_id: str, status: str) -> StatusUpdateResult:
        action = {"accepted": "accept", "rejected": "reject"}.get(status)
        if action is None:
            return StatusUpdateResult(success=False, error="Status must be one of: accepted, rejected")

        payload, error, _ = self._call(
            "PATCH", f"/requests/{request_id}/{action}",
            "Failed to update request status",
        )
        if error:
            return StatusUpdateResult(success=False, error=error)
        return StatusUpdateResult.model_validate(payload)
