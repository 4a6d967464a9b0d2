"""HTTP transport for the TRON full-node API.

Thin request/response wrapper: no retries, no interpretation beyond turning
transport failures into ``TransportError``. Addresses go over the wire in hex
(``visible: false``).
"""

import logging
from typing import Any

import httpx

from tronwallet.core.config import get_settings
from tronwallet.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class TronNodeTransport:
    """Async client for ``/wallet/*`` endpoints of a full node."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize node transport.

        Args:
            base_url: Full-node HTTP endpoint. If None, uses the active network.
            api_key: TronGrid API key. If None, uses config.
            timeout: Request timeout in seconds. If None, uses config.
            http_transport: httpx transport override (tests use ``httpx.MockTransport``)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.active_node_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.tron_api_key
        self.timeout = timeout if timeout is not None else settings.request_timeout

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["TRON-PRO-API-KEY"] = self.api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=http_transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TronNodeTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _post(self, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST a JSON body and return the decoded JSON object.

        Raises:
            TransportError: Connection failure, timeout, HTTP error status,
                or a body that is not a JSON object
        """
        try:
            response = await self._client.post(path, json=payload or {})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{path} returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{path} failed: {e!r}") from e

        if not response.content.strip():
            raise TransportError(f"{path} returned an empty body")
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"{path} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise TransportError(f"{path} returned {type(body).__name__}, expected object")

        logger.debug(f"POST {path} -> {len(response.content)} bytes")
        return body

    async def create_account(self, owner_address: str, account_address: str) -> dict[str, Any]:
        return await self._post(
            "/wallet/createaccount",
            {"owner_address": owner_address, "account_address": account_address, "visible": False},
        )

    async def get_account(self, address: str) -> dict[str, Any]:
        return await self._post("/wallet/getaccount", {"address": address, "visible": False})

    async def trigger_constant_contract(
        self, owner_address: str, contract_address: str, data: str
    ) -> dict[str, Any]:
        """Read-only contract call; ``data`` is selector + arguments in hex."""
        return await self._post(
            "/wallet/triggerconstantcontract",
            {
                "owner_address": owner_address,
                "contract_address": contract_address,
                "data": data,
                "visible": False,
            },
        )

    async def trigger_smart_contract(
        self,
        owner_address: str,
        contract_address: str,
        data: str,
        fee_limit: int,
        call_value: int = 0,
    ) -> dict[str, Any]:
        return await self._post(
            "/wallet/triggersmartcontract",
            {
                "owner_address": owner_address,
                "contract_address": contract_address,
                "data": data,
                "fee_limit": fee_limit,
                "call_value": call_value,
                "visible": False,
            },
        )

    async def create_transaction(
        self, owner_address: str, to_address: str, amount: int
    ) -> dict[str, Any]:
        return await self._post(
            "/wallet/createtransaction",
            {
                "owner_address": owner_address,
                "to_address": to_address,
                "amount": amount,
                "visible": False,
            },
        )

    async def broadcast_transaction(self, transaction: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/wallet/broadcasttransaction", transaction)

    async def get_now_block(self) -> dict[str, Any]:
        return await self._post("/wallet/getnowblock")

    async def get_block_by_number(self, number: int) -> dict[str, Any]:
        return await self._post("/wallet/getblockbynum", {"num": number})

    async def get_transaction_info(self, tx_id: str) -> dict[str, Any]:
        return await self._post("/wallet/gettransactioninfobyid", {"value": tx_id})
