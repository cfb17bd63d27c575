"""HTTP client for the AI parsing backend."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from hearth.core.errors import AIBackendError, AuthenticationRequiredError

logger = logging.getLogger(__name__)

USER_HEADER = "X-Household-UID"


class AIParsingClient:
    """
    Client for the AI parsing worker.

    Every request is a JSON POST to a single endpoint; the payload's flags
    (``isDocument``, ``isRecipe``) select what the worker extracts. Requests
    require an authenticated household member, passed along as a header
    the worker verifies.
    """

    def __init__(
        self,
        endpoint: str,
        user_id: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            endpoint: Worker URL
            user_id: Authenticated member id; ``None`` means signed out
            timeout: Seconds before giving up on a request; ``None`` waits indefinitely
            session: Session to reuse (a fresh one is created otherwise)
        """
        self.endpoint = endpoint
        self.user_id = user_id
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def parse_input(
        self,
        transcript: str,
        is_document: bool = False,
        filename: Optional[str] = None,
    ) -> Any:
        return self._post(
            {"transcript": transcript, "isDocument": is_document, "filename": filename},
            "Worker request failed",
        )

    def parse_recipe(self, text: str) -> dict[str, Any]:
        payload = self._post(
            {"transcript": text, "isRecipe": True, "parseType": "recipe"},
            "Recipe parsing failed",
        )
        if not isinstance(payload, dict):
            raise AIBackendError("Recipe parsing returned an unexpected payload")
        return payload

    def parse_recipe_image(self, base64_image: str) -> dict[str, Any]:
        payload = self._post(
            {"image": base64_image, "isRecipe": True, "parseType": "recipe-image"},
            "Recipe image parsing failed",
        )
        if not isinstance(payload, dict):
            raise AIBackendError("Recipe image parsing returned an unexpected payload")
        return payload

    def _auth_headers(self) -> dict[str, str]:
        if not self.user_id:
            raise AuthenticationRequiredError("Authentication required for AI features")
        return {USER_HEADER: self.user_id}

    def _post(self, payload: dict[str, Any], failure_message: str) -> Any:
        headers = self._auth_headers()
        logger.debug(f"POST {self.endpoint} ({sorted(k for k, v in payload.items() if v)})")
        try:
            response = self._session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise AIBackendError(f"{failure_message}: {exc}") from exc

        if not response.ok:
            raise AIBackendError(self._error_message(response) or failure_message)

        try:
            return response.json()
        except ValueError as exc:
            raise AIBackendError(f"{failure_message}: response was not JSON") from exc

    def _error_message(self, response: requests.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return None
