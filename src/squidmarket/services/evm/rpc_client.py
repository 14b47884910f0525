"""EVM JSON-RPC client for read-only chain access.

Extends BaseAPIClient to inherit the circuit breaker and lazy httpx
client. Requests are sent exactly once: the discovery pipeline treats
every failure as a skipped item or a default value, never as a retry.
"""

from typing import Any

import structlog

from squidmarket.config.settings import get_settings
from squidmarket.core.exceptions import (
    ContractCallError,
    ContractRevertError,
    ExternalServiceError,
)
from squidmarket.services.base import BaseAPIClient

log = structlog.get_logger(__name__)

# JSON-RPC error code geth and most providers use for reverts
REVERT_ERROR_CODE = 3


def is_revert_error(error: dict[str, Any]) -> bool:
    """Tell a contract revert apart from a node-side failure."""
    if error.get("code") == REVERT_ERROR_CODE:
        return True
    message = str(error.get("message", "")).lower()
    return "revert" in message or "nonexistent token" in message


class EVMRPCClient(BaseAPIClient):
    """Client for EVM JSON-RPC reads.

    Example:
        client = EVMRPCClient()
        raw = await client.eth_call("0xabc...", "0x06fdde03")
        await client.close()
    """

    def __init__(self, rpc_url: str | None = None, timeout: float | None = None) -> None:
        settings = get_settings()
        super().__init__(
            base_url=rpc_url or settings.rpc_url,
            timeout=timeout or settings.rpc_timeout_seconds,
            headers={"Content-Type": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
            max_retries=1,
        )
        self._request_id = 0

    async def _rpc(self, method: str, params: list[Any]) -> dict[str, Any]:
        """Send one JSON-RPC request and return the decoded envelope."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        response = await self.post("", json=payload)
        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                service="rpc", message=f"{method}: invalid JSON response"
            ) from e
        if not isinstance(data, dict):
            raise ExternalServiceError(service="rpc", message=f"{method}: unexpected response")
        return data

    async def eth_call(self, to: str, data: str, block: str = "latest") -> bytes:
        """Execute a read-only contract call.

        Args:
            to: Contract address.
            data: 0x-prefixed calldata.
            block: Block tag to read at.

        Returns:
            Raw return data.

        Raises:
            ContractRevertError: The call reverted.
            ContractCallError: The node returned any other JSON-RPC error.
            ExternalServiceError: Transport failure or malformed response.
        """
        envelope = await self._rpc("eth_call", [{"to": to, "data": data}, block])

        error = envelope.get("error")
        if error is not None:
            error = error if isinstance(error, dict) else {"message": str(error)}
            message = str(error.get("message", "unknown error"))
            if is_revert_error(error):
                raise ContractRevertError(to, data[:10], message)
            raise ContractCallError(to, data[:10], message)

        result = envelope.get("result")
        if not isinstance(result, str):
            raise ExternalServiceError(service="rpc", message="eth_call: missing result")
        try:
            return bytes.fromhex(result.removeprefix("0x"))
        except ValueError as e:
            raise ExternalServiceError(service="rpc", message="eth_call: malformed result") from e

    async def get_block_number(self) -> int:
        """Latest block number."""
        envelope = await self._rpc("eth_blockNumber", [])
        if "error" in envelope:
            raise ExternalServiceError(service="rpc", message=str(envelope["error"]))
        return int(envelope["result"], 16)

    async def get_logs(
        self,
        address: str,
        topics: list[str | None],
        from_block: int,
        to_block: int,
    ) -> list[dict[str, Any]]:
        """Fetch event logs emitted by ``address`` within a block range."""
        envelope = await self._rpc(
            "eth_getLogs",
            [
                {
                    "address": address,
                    "topics": topics,
                    "fromBlock": hex(from_block),
                    "toBlock": hex(to_block),
                }
            ],
        )
        if "error" in envelope:
            raise ExternalServiceError(service="rpc", message=str(envelope["error"]))
        return list(envelope.get("result") or [])


# Singleton instance
_rpc_client: EVMRPCClient | None = None


async def get_rpc_client() -> EVMRPCClient:
    """Get or create the RPC client singleton."""
    global _rpc_client
    if _rpc_client is None:
        _rpc_client = EVMRPCClient()
        log.info("rpc_client_initialized", rpc_url=_rpc_client.base_url)
    return _rpc_client


async def close_rpc_client() -> None:
    """Close and clear the RPC client singleton."""
    global _rpc_client
    if _rpc_client is not None:
        await _rpc_client.close()
        _rpc_client = None
