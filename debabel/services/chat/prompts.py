"""System prompt construction for the chat model."""

from dataclasses import dataclass

from fastapi import Request

from debabel.services.language.registry import get_language_name

REGULAR_PROMPT = (
    "You are a friendly assistant! Keep your responses concise and helpful."
)


@dataclass(frozen=True)
class RequestHints:
    """Geolocation of the caller, as reported by the edge in front of us."""

    latitude: str | None = None
    longitude: str | None = None
    city: str | None = None
    country: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestHints":
        headers = request.headers
        return cls(
            latitude=headers.get("x-vercel-ip-latitude"),
            longitude=headers.get("x-vercel-ip-longitude"),
            city=headers.get("x-vercel-ip-city"),
            country=headers.get("x-vercel-ip-country"),
        )


def request_prompt(hints: RequestHints) -> str:
    return (
        "About the origin of user's request:\n"
        f"- lat: {hints.latitude}\n"
        f"- lon: {hints.longitude}\n"
        f"- city: {hints.city}\n"
        f"- country: {hints.country}"
    )


def language_prompt(input_language: str, search_language: str) -> str:
    search_name = get_language_name(search_language)
    if input_language == search_language:
        return f"Respond in {search_name}."
    return (
        f"The user writes in {get_language_name(input_language)}; their messages "
        f"have been translated to {search_name} for you. Always respond in "
        f"{search_name}. Your answer is translated back for the user, so do not "
        "mention the translation and do not translate it yourself."
    )


def system_prompt(
    selected_chat_model: str,
    request_hints: RequestHints,
    input_language: str,
    search_language: str,
) -> str:
    sections = [
        REGULAR_PROMPT,
        request_prompt(request_hints),
        language_prompt(input_language, search_language),
    ]
    if selected_chat_model == "chat-model-reasoning":
        sections.append(
            "Think step by step inside <think></think> tags before giving the final answer."
        )
    return "\n\n".join(sections)
