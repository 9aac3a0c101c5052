"""Language registry response schemas."""

from pydantic import BaseModel, ConfigDict


class LanguageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    native_name: str
    country_code: str


class LanguageListResponse(BaseModel):
    """GET /v1/languages response body."""

    languages: list[LanguageOut]
    default_input_language: str
    default_search_language: str
