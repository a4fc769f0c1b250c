"""
Credit Card Client Module

REST client for the credit card service. VIP and PYME accounts may only be
opened by customers who already hold a credit card.
"""

import httpx
import logging
import time
from typing import List, Optional

from .circuit_breaker import CircuitBreaker
from .errors import BusinessRuleViolation, InternalError, ServiceUnavailableError

logger = logging.getLogger("account_service.credit_card")


class CreditCardClient:
    """
    REST client for the credit card eligibility check.

    Request:  POST {url}  {"customerId": ["c1", "c2"]}
    Response: {"creditCard": true}

    Failures are classified instead of defaulted: 5xx and transport errors
    raise ServiceUnavailableError, 4xx raises BusinessRuleViolation and an
    unreadable body raises InternalError.
    """

    def __init__(
        self,
        url: str = "http://localhost:8087/creditcards/exists",
        timeout: float = 5.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url
        self.timeout = timeout
        self.circuit_breaker = circuit_breaker
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"}
        )

    async def has_credit_card(self, customer_ids: List[str]) -> bool:
        """Check whether any of the customer ids holds an active credit card"""
        if self.circuit_breaker is None:
            return await self._request(customer_ids)
        return await self.circuit_breaker.call(lambda: self._request(customer_ids))

    async def _request(self, customer_ids: List[str]) -> bool:
        start = time.time()
        try:
            response = await self._client.post(self.url, json={"customerId": customer_ids})
        except httpx.TransportError as e:
            logger.error(f"Credit card service unreachable: {e}")
            raise ServiceUnavailableError("Card service unreachable") from e

        latency_ms = (time.time() - start) * 1000
        logger.debug(f"Credit card service answered {response.status_code} in {latency_ms:.1f}ms")

        if response.status_code >= 500:
            logger.warning(f"Credit card service returned {response.status_code}: {response.text}")
            raise ServiceUnavailableError("Card service not available")
        if response.status_code >= 400:
            logger.warning(f"Credit card service rejected request with {response.status_code}")
            raise BusinessRuleViolation("Client error checking card")
        if response.status_code != 200:
            raise InternalError(f"Unexpected card service status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise InternalError("Malformed card service response") from e

        has_card = data.get("creditCard") if isinstance(data, dict) else None
        if not isinstance(has_card, bool):
            raise InternalError("Card service response missing creditCard flag")
        return has_card

    async def close(self):
        """Close the HTTP client"""
        await self._client.aclose()
