import asyncio
import logging

import httpx

from ..config import Settings
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class LineProtocolWriter:
    """
    Sends line protocol payloads to the configured write endpoint.

    One instance, and its httpx client, is shared by all connections.
    ``submit`` is fire-and-forget: each write runs as its own task and its
    outcome is only logged.
    """

    def __init__(self, client: httpx.AsyncClient, url: str, token: str):
        self.client = client
        self.url = url
        self.headers = {
            "Authorization": f"Token {token}",
            "Content-Type": "text/plain; charset=utf-8",
            "Accept": "application/json",
        }
        self._pending: set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LineProtocolWriter":
        client = httpx.AsyncClient(timeout=settings.write_timeout_seconds)
        return cls(client, settings.url, settings.token)

    async def write(self, payload: str) -> httpx.Response:
        try:
            response = await self.client.post(self.url, content=payload.encode("utf-8"), headers=self.headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise TransportError(response.text or response.reason_phrase, status_code=response.status_code)
        return response

    async def _write_and_log(self, payload: str, host: str):
        try:
            await self.write(payload)
        except TransportError as e:
            logger.warning(f"[WRITE] host={host} request finished with error: {e}")
        else:
            logger.debug(f"[WRITE] host={host} wrote {len(payload)} bytes")

    def submit(self, payload: str, host: str) -> asyncio.Task:
        """Schedule a write without waiting for it."""
        task = asyncio.create_task(self._write_and_log(payload, host))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def aclose(self):
        """Let in-flight writes finish, then close the HTTP client."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self.client.aclose()
