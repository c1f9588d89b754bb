"""Fixed-interval transcript polling for one open conversation."""

import asyncio
import contextlib
from typing import List, Optional

from tumbi.client.api import TumbiClient
from tumbi.client.errors import ApiError
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.schemas.chat import MessageResponse

logger = get_logger(__name__)


def ordered_transcript(messages: List[MessageResponse]) -> List[MessageResponse]:
    """Sort by (created_at, id) and keep one copy of each message id."""
    unique = {message.id: message for message in messages}
    return sorted(unique.values(), key=lambda m: (m.created_at, m.id))


class ConversationPoller:
    """
    Keeps ``messages`` in step with the server while the chat view is open.

    ``start()`` fetches immediately and then every ``interval`` seconds in a
    background task; ``stop()`` cancels that task and waits for it, so no
    request is issued afterwards. Every successful fetch replaces the whole
    transcript. Sent messages are never appended locally: they appear once
    the server returns them.
    """

    def __init__(
        self,
        client: TumbiClient,
        conversation_id: int,
        interval: Optional[float] = None
    ):
        self.client = client
        self.conversation_id = conversation_id
        self.interval = settings.CHAT_POLL_INTERVAL if interval is None else interval

        self.messages: List[MessageResponse] = []
        self.draft = ""
        self.sending = False

        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self._issued = 0
        self._applied = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __aenter__(self) -> "ConversationPoller":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        if self.running:
            return
        self._generation += 1
        generation = self._generation
        await self.refresh()
        # stop() or another start() ran during the first fetch
        if generation != self._generation:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def refresh(self) -> bool:
        """Fetch the transcript once. Failures are logged and skipped."""
        self._issued += 1
        ticket = self._issued
        try:
            messages = await self.client.messages(self.conversation_id)
        except ApiError as e:
            logger.warning(f"Poll of conversation {self.conversation_id} failed: {e}")
            return False

        # A slower, older fetch must not overwrite a newer one
        if ticket < self._applied:
            return False
        self._applied = ticket
        self.messages = ordered_transcript(messages)
        return True

    async def send(self, content: Optional[str] = None) -> Optional[MessageResponse]:
        """
        Send ``content`` (or the current draft), then re-fetch.

        On failure the draft is kept for a retry and the error propagates.
        """
        text = self.draft if content is None else content
        self.draft = text
        if not text.strip():
            return None

        self.sending = True
        try:
            message = await self.client.send_message(self.conversation_id, text)
        except ApiError as e:
            logger.warning(f"Send to conversation {self.conversation_id} failed: {e}")
            raise
        finally:
            self.sending = False

        self.draft = ""
        await self.refresh()
        return message

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.refresh()
