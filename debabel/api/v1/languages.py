"""Supported-language catalog for language pickers."""

from fastapi import APIRouter

from debabel.schemas.language import LanguageListResponse, LanguageOut
from debabel.services.language.registry import (
    DEFAULT_INPUT_LANGUAGE,
    DEFAULT_SEARCH_LANGUAGE,
    all_languages,
)

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("", response_model=LanguageListResponse)
async def list_languages() -> LanguageListResponse:
    return LanguageListResponse(
        languages=[LanguageOut.model_validate(lang) for lang in all_languages()],
        default_input_language=DEFAULT_INPUT_LANGUAGE,
        default_search_language=DEFAULT_SEARCH_LANGUAGE,
    )
