"""Flow Access REST client with endpoint fallback."""
from __future__ import annotations

import asyncio
import base64
import json
import logging
import ssl
from typing import Any, Mapping

import aiohttp
import certifi

from ...cadence import decode, resolve_imports
from ...config import LedgerConfig
from ...errors import LedgerError, LedgerQueryError, LedgerSubmissionError
from ...models import SealedResult

logger = logging.getLogger(__name__)

SEALED = "Sealed"
EXPIRED = "Expired"


class AccessNodeError(LedgerError):
    """The access node answered with a 4xx; other endpoints would answer the same."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


def _b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


class FlowAccessClient:
    """Flow blockchain Access API client: script queries and transaction finality."""

    def __init__(self, config: LedgerConfig, contracts: Mapping[str, str]) -> None:
        self.endpoints = list(config.access_node_endpoints)
        self.timeout = config.request_timeout
        self.poll_interval = config.seal_poll_interval
        self.contracts = dict(contracts)
        self.current_endpoint_index = 0

    async def request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        """Make an Access API call with fallback to alternative endpoints."""
        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            index = (self.current_endpoint_index + attempt) % len(self.endpoints)
            base_url = self.endpoints[index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.request(
                        method,
                        f"{base_url}{path}",
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        body = await response.json(content_type=None)
                        if 400 <= response.status < 500:
                            message = body.get("message", "") if isinstance(body, dict) else str(body)
                            raise AccessNodeError(response.status, message)
                        if response.status >= 500:
                            raise RuntimeError(f"HTTP {response.status}")

                        if index != self.current_endpoint_index:
                            logger.info("Switched to access node: %s", base_url)
                            self.current_endpoint_index = index

                        return body
            except AccessNodeError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("Access node %s failed: %s", base_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise LedgerError(f"All access node endpoints failed. Last error: {last_error}")

    async def query(self, program: str, args: list[dict[str, Any]] | None = None) -> Any:
        """Execute a read-only script against the latest sealed block."""
        payload = {
            "script": _b64(resolve_imports(program, self.contracts)),
            "arguments": [_b64(json.dumps(a)) for a in args or []],
        }
        try:
            encoded = await self.request("POST", "/v1/scripts?block_height=sealed", payload)
            return decode(json.loads(base64.b64decode(encoded)))
        except LedgerQueryError:
            raise
        except Exception as e:
            raise LedgerQueryError(str(e)) from e

    async def get_transaction_result(self, transaction_id: str) -> dict[str, Any]:
        """Get the current execution result of a transaction."""
        return await self.request("GET", f"/v1/transaction_results/{transaction_id}")

    async def await_sealed(self, transaction_id: str) -> SealedResult:
        """Poll until the transaction is sealed.

        Raises ``LedgerSubmissionError`` when the transaction expires or is
        sealed with an execution error. There is no overall timeout.
        """
        last_status = None
        while True:
            try:
                result = await self.get_transaction_result(transaction_id)
            except AccessNodeError as e:
                if e.status != 404:
                    raise LedgerSubmissionError(str(e)) from e
                # not yet known to this node
                result = {"status": "Unknown"}
            except LedgerError as e:
                raise LedgerSubmissionError(str(e)) from e

            status = result.get("status", "Unknown")
            if status != last_status:
                logger.debug("Transaction %s status: %s", transaction_id, status)
                last_status = status

            if status == EXPIRED:
                raise LedgerSubmissionError(
                    f"Transaction {transaction_id} expired before it was sealed"
                )
            if status == SEALED:
                error_message = result.get("error_message", "")
                if error_message:
                    raise LedgerSubmissionError(error_message)
                return SealedResult(
                    status_string=status.upper(),
                    status_code=int(result.get("status_code", 0)),
                    error_message=error_message,
                    events=tuple(result.get("events", [])),
                )

            await asyncio.sleep(self.poll_interval)
