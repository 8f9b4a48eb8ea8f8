"""
HTTP client for the bank API.

Implements the ``Bank`` protocol over a JSON HTTP API. Every failure is
reported as the contract error of the called operation so the
withdrawal engine can always classify it.
"""

from __future__ import annotations

from typing import Any, Final, Optional

import httpx

from atm_machine.core.exceptions import AccountError, AuthorizationError
from atm_machine.core.value_objects import AuthorizationToken, Money
from atm_machine.loggers import logger


AUTHORIZATION_REJECTED: Final[frozenset[int]] = frozenset({401, 403})
CHARGE_REJECTED: Final[frozenset[int]] = frozenset({402, 409, 422})


class HttpBank:
    """
    Bank API client.

    Endpoints:
    - POST /authorizations: {"pin", "card_number"} -> {"token"}
    - POST /charges: {"token", "amount", "currency"}
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Bank API root URL.
            timeout: Request timeout in seconds.
            client: Preconfigured httpx client, created when omitted.
        """
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_client = client is None

    def authorize(self, pin: str, card_number: str) -> AuthorizationToken:
        try:
            response = self._client.post(
                "/authorizations",
                json={"pin": pin, "card_number": card_number},
            )
        except httpx.HTTPError as e:
            logger.error(f"Bank authorization request failed: {e}")
            raise AuthorizationError(
                "Bank is unreachable", details={"cause": str(e)}
            ) from e

        if response.status_code in AUTHORIZATION_REJECTED:
            raise AuthorizationError(
                "Authorization rejected by bank",
                details=self._error_details(response),
            )
        if response.is_error:
            logger.error(f"Unexpected bank response to authorization: {response.status_code}")
            raise AuthorizationError(
                f"Bank returned HTTP {response.status_code}",
                details=self._error_details(response),
            )

        try:
            token = response.json()["token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthorizationError(
                "Malformed authorization response", details={"cause": str(e)}
            ) from e
        return AuthorizationToken.create(str(token))

    def charge(self, token: AuthorizationToken, amount: Money) -> None:
        try:
            response = self._client.post(
                "/charges",
                json={
                    "token": token.value,
                    "amount": amount.amount,
                    "currency": amount.currency.code,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Bank charge request failed: {e}")
            raise AccountError("Bank is unreachable", details={"cause": str(e)}) from e

        if response.status_code in CHARGE_REJECTED:
            raise AccountError(
                "Charge rejected by bank",
                details=self._error_details(response),
            )
        if response.is_error:
            logger.error(f"Unexpected bank response to charge: {response.status_code}")
            raise AccountError(
                f"Bank returned HTTP {response.status_code}",
                details=self._error_details(response),
            )

    @staticmethod
    def _error_details(response: httpx.Response) -> dict[str, Any]:
        details: dict[str, Any] = {"status": response.status_code}
        try:
            body = response.json()
        except ValueError:
            return details
        if isinstance(body, dict) and "reason" in body:
            details["reason"] = body["reason"]
        return details

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpBank:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
