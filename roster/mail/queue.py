"""
Outbound mail queue for Roster.

Invitation emails are fire-and-forget: ``enqueue`` never blocks and never
reports delivery. A background worker drains the queue and hands each
message to a MailSender. Delivery failures are logged and dropped.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional, Protocol

import httpx

from .models import MailMessage

logger = logging.getLogger(__name__)


class MailQueue(Protocol):
    """Anything that accepts outbound mail."""

    def enqueue(self, message: MailMessage) -> None:
        ...


class MailSender(Protocol):
    """Delivers one message."""

    async def send(self, message: MailMessage) -> None:
        ...

    async def close(self) -> None:
        ...


class LoggingMailSender:
    """Sender used when no relay is configured: logs instead of delivering."""

    async def send(self, message: MailMessage) -> None:
        logger.info("Mail to %s: %s", message.recipient, message.subject)

    async def close(self) -> None:
        pass


class HttpMailSender:
    """
    Posts messages as JSON to an HTTP mail relay.

    Non-2xx responses and transport errors are retried with fixed delays.
    """

    MAX_RETRIES = 3
    RETRY_DELAYS = [1, 5, 30]  # seconds

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.token = token
        self.timeout = timeout
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for mail delivery."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def send(self, message: MailMessage) -> None:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        body = message.model_dump_json()

        for attempt in range(1, self.MAX_RETRIES + 1):
            try:
                http_client = await self._get_http_client()
                response = await http_client.post(self.url, content=body, headers=headers)
                response.raise_for_status()
                return
            except httpx.HTTPError as e:
                logger.warning(
                    "Mail relay attempt %d/%d for %s failed: %s",
                    attempt,
                    self.MAX_RETRIES,
                    message.recipient,
                    e,
                )
                if attempt == self.MAX_RETRIES:
                    raise
                await asyncio.sleep(self.RETRY_DELAYS[min(attempt - 1, len(self.RETRY_DELAYS) - 1)])

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


class AsyncMailQueue:
    """
    In-process mail queue backed by ``asyncio.Queue``.

    The worker task starts on the first enqueue made from inside a running
    event loop.

    Example:
        ```python
        queue = AsyncMailQueue(HttpMailSender("https://mail.internal/send"))
        queue.enqueue(MailMessage(recipient="bob@example.com", subject="Hi", html_body="<p>Hi</p>"))
        await queue.close()  # drains pending mail
        ```
    """

    def __init__(
        self,
        sender: Optional[MailSender] = None,
        maxsize: int = 1000,
        failed_limit: int = 100,
    ) -> None:
        self.sender = sender or LoggingMailSender()
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None
        # Most recent undeliverable messages, oldest dropped first
        self.failed: Deque[MailMessage] = deque(maxlen=failed_limit)

    def enqueue(self, message: MailMessage) -> None:
        """
        Queue a message for delivery.

        Raises:
            asyncio.QueueFull: If the queue is at capacity
        """
        self._queue.put_nowait(message)
        self._ensure_worker()

    def _ensure_worker(self) -> None:
        if self._worker is not None and not self._worker.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._worker = loop.create_task(self._run())

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self.sender.send(message)
            except Exception:
                # Best-effort channel: a failed message must not stop the worker
                logger.exception("Failed to deliver mail to %s", message.recipient)
                self.failed.append(message)
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        """Wait until every queued message has been handed to the sender."""
        self._ensure_worker()
        if self._worker is not None:
            await self._queue.join()

    async def close(self) -> None:
        """Drain pending mail, stop the worker and close the sender."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        await self.sender.close()
