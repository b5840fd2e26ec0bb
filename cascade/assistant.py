import asyncio
import logging
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from cascade.domain import ChatMessage

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hi! I'm your AI financial assistant. I can help you with budgeting, "
    "spending analysis, and financial advice. What would you like to know?"
)
RESPONSE_DELAY = 1.5


def canned_response(text: str) -> str:
    return f"Here's what I found about {text.lower()}..."


class AssistantState(Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting-response"


class Assistant:
    """Chat log with a simulated typing delay before each canned reply.

    Only one reply can be pending; a message sent while waiting is refused.
    """

    def __init__(self, delay: float = RESPONSE_DELAY, suggestions: Iterable[str] = ()):
        self.delay = delay
        self.suggestions: Tuple[str, ...] = tuple(suggestions)
        self.state = AssistantState.IDLE
        self._messages: List[ChatMessage] = [ChatMessage(WELCOME_MESSAGE, is_user=False)]
        self._pending: Optional[str] = None

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_typing(self) -> bool:
        return self.state is AssistantState.AWAITING_RESPONSE

    def can_send(self, text: str) -> bool:
        return bool(text.strip()) and not self.is_typing

    def submit(self, text: str) -> Optional[ChatMessage]:
        """Append the user's message right away. Returns None if nothing was sent."""
        if not text.strip():
            return None
        if self.is_typing:
            logger.debug("assistant busy, dropping message")
            return None

        message = ChatMessage(text, is_user=True)
        self._messages.append(message)
        self._pending = text
        self.state = AssistantState.AWAITING_RESPONSE
        logger.debug("assistant awaiting response")
        return message

    async def respond(self) -> Optional[ChatMessage]:
        text = self._pending
        if text is None:
            return None
        # claimed before sleeping so an overlapping call finds nothing to answer
        self._pending = None
        await asyncio.sleep(self.delay)

        reply = ChatMessage(canned_response(text), is_user=False)
        self._messages.append(reply)
        self.state = AssistantState.IDLE
        logger.debug("assistant response delivered")
        return reply

    async def send(self, text: str) -> Optional[ChatMessage]:
        if self.submit(text) is None:
            return None
        return await self.respond()
