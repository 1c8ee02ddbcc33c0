"""Pydantic models for data structures."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_BASE_URI = "https://api.si.edu/openaccess/api/v1.0/"

SORT_VALUES = ("relevancy", "id", "newest", "updated", "random")
TYPE_VALUES = ("edanmdm", "ead_collection", "ead_component", "all")
ROW_GROUP_VALUES = ("objects", "archives")
CATEGORY_VALUES = ("art_design", "history_culture", "science_technology")

IMAGES_ONLY_CLAUSE = " AND online_visual_material:true"

Endpoint = Literal["search", "content", "stats", "terms", "category"]
Category = Literal["art_design", "history_culture", "science_technology"]
Term = Literal[
    "culture",
    "data_source",
    "date",
    "object_type",
    "online_media_type",
    "place",
    "topic",
    "unit_code",
]

ENDPOINT_LABELS: dict[str, str] = {
    "search": "Search",
    "content": "Content",
    "stats": "Stats",
    "terms": "Terms",
    "category": "Category",
}
CATEGORY_LABELS: dict[str, str] = {
    "art_design": "Art & Design",
    "history_culture": "History & Culture",
    "science_technology": "Science & Technology",
}
# Field labels on the settings screen, keyed by endpoint
SETTINGS_ENDPOINT_LABELS: dict[str, str] = {
    "search": "Search",
    "content": "Content",
    "stats": "Stats",
    "category": "Category Search",
    "terms": "Terms",
}
TERM_LABELS: dict[str, str] = {
    "culture": "Culture",
    "data_source": "Data Source",
    "date": "Date",
    "object_type": "Object Type",
    "online_media_type": "Online Media Type",
    "place": "Place",
    "topic": "Topic",
    "unit_code": "Unit Code",
}


class ApiSettings(BaseModel):
    """Connection settings for the Open Access API."""

    base_uri: str = Field(default=DEFAULT_BASE_URI, description="URI including the API version")
    api_key: str = Field(default="", description="Key obtained from https://api.data.gov")
    search_endpoint: str = Field(default="search", description="Search endpoint path")
    content_endpoint: str = Field(default="content", description="Content endpoint path")
    stats_endpoint: str = Field(default="stats", description="Stats endpoint path")
    category_endpoint: str = Field(
        default="category/:cat/search", description="Category search path, ':cat' is replaced"
    )
    terms_endpoint: str = Field(
        default="", description="Terms path, ':category' is replaced (e.g. terms/:category)"
    )

    def masked(self) -> dict[str, Any]:
        """Dump with the API key hidden, for display."""
        data = self.model_dump()
        key = data["api_key"]
        if len(key) >= 8:
            data["api_key"] = f"{'*' * (len(key) - 4)}{key[-4:]}"
        else:
            data["api_key"] = "*" * len(key)
        return data


class SettingsForm(ApiSettings):
    """Settings as submitted from the settings screen; every field is required."""

    model_config = ConfigDict(validate_default=True)

    @field_validator("*")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("field is required")
        return value


class OperationRequest(BaseModel):
    """Parameters picked on the interactive test screen."""

    endpoint: Endpoint = Field(default="search", description="API endpoint to call")
    query: str = Field(
        default="", max_length=64, description="Search word, or object ID for the content endpoint"
    )
    category: Category = Field(default="art_design", description="Category for category search")
    term: Term = Field(default="topic", description="Term category for terms search")

    @model_validator(mode="after")
    def _query_required(self) -> "OperationRequest":
        if self.endpoint in ("search", "content", "category") and not self.query.strip():
            raise ValueError(f"query is required for the {self.endpoint} endpoint")
        return self


class OperationResult(BaseModel):
    """Outcome of one interactive call."""

    endpoint: str
    ok: bool
    results: dict[str, Any] | None = None
    rendered: str
    error: str | None = None


class EndpointCheckResult(BaseModel):
    """Outcome of a settings-screen endpoint test."""

    endpoint: str
    ok: bool
    message: str
