"""
Authentication action boundary.

The backend that checks credentials and creates accounts is an external
service. These actions post a submission's payload to it, form-encoded,
and return its JSON answer: {success, message, redirect?}.

A 4xx answer carrying that JSON body is a domain rejection and is handed
back as-is. Anything else unusable (5xx, non-JSON body, network error)
raises, and the SubmissionCoordinator reports it as a transport failure.
"""

from typing import Any, Dict, Optional

import httpx


class AuthActionError(Exception):
    """The authentication service answered with something unusable."""


class HttpAuthenticationActions:
    """
    Network-backed sign-in and sign-up actions.

    Args:
        base_url: Root URL of the authentication service.
        sign_in_path / sign_up_path: Endpoint paths under ``base_url``.
        timeout: Request timeout in seconds. This layer enforces no other.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        sign_in_path: str = '/sign-in',
        sign_up_path: str = '/sign-up',
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.sign_in_path = sign_in_path
        self.sign_up_path = sign_up_path
        self.timeout = timeout
        self.transport = transport

    async def sign_in(self, payload: Dict[str, str]) -> Dict[str, Any]:
        return await self._post(self.sign_in_path, payload)

    async def sign_up(self, payload: Dict[str, str]) -> Dict[str, Any]:
        return await self._post(self.sign_up_path, payload)

    def for_variant(self, variant_name: str):
        """Return the action serving ``variant_name``."""
        return {'sign-in': self.sign_in, 'sign-up': self.sign_up}[variant_name]

    async def _post(self, path: str, payload: Dict[str, str]) -> Dict[str, Any]:
        # One client per call: each submission runs in its own event loop.
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            response = await client.post(path, data=payload)

        if response.status_code >= 500:
            raise AuthActionError(f'Authentication service returned {response.status_code}')

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthActionError(
                f'Authentication service returned a non-JSON body ({response.status_code})'
            ) from exc

        if not isinstance(body, dict):
            raise AuthActionError('Authentication service returned a non-object body')
        return body
