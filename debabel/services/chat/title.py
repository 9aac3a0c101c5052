"""Chat title generation from the first user message."""

import structlog

from debabel.schemas.chat import ChatMessage
from debabel.services.llm.base import LLMProvider, prompt_messages

logger = structlog.get_logger(__name__)

_MAX_TITLE_CHARS = 80

_TITLE_SYSTEM_PROMPT = """
    - you will generate a short title based on the first message a user begins a conversation with
    - ensure it is not more than 80 characters long
    - the title should be a summary of the user's message
    - do not use quotes or colons"""


async def generate_title_from_user_message(
    message: ChatMessage, llm: LLMProvider
) -> str:
    """Ask the title model for a short summary title of the message."""
    response = await llm.generate(
        prompt_messages(message.model_dump_json(include={"role", "parts"})),
        system_prompt=_TITLE_SYSTEM_PROMPT,
    )
    title = response.text.strip().strip('"').replace(":", "")
    logger.debug("chat_title_generated", title_len=len(title))
    return title[:_MAX_TITLE_CHARS] or message.text()[:_MAX_TITLE_CHARS] or "New chat"
