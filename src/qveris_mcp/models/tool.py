# Qveris API data models
# Pydantic models mirroring the search/execute wire schema

from typing import Any, Literal

from pydantic import BaseModel, JsonValue

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_MAX_DATA_SIZE = 20480
UNLIMITED_DATA_SIZE = -1


class ToolParameter(BaseModel):
    """Single input parameter accepted by a tool."""

    name: str
    type: Literal["string", "number", "boolean", "array", "object"]
    required: bool
    description: str
    enum: list[str] | None = None

    model_config = {"extra": "allow"}


class ToolExamples(BaseModel):
    sample_parameters: dict[str, JsonValue] | None = None

    model_config = {"extra": "allow"}


class ToolInfo(BaseModel):
    """Tool descriptor returned by search and lookup."""

    tool_id: str
    name: str
    description: str
    provider_name: str | None = None
    provider_description: str | None = None
    # "global", whitelist "US|CA" or blacklist "!CN|RU"
    region: str | None = None
    avg_latency_ms: float | None = None
    params: list[ToolParameter] | None = None
    examples: ToolExamples | None = None

    model_config = {"extra": "allow"}


class SearchStats(BaseModel):
    search_time_ms: float

    model_config = {"extra": "allow"}


class SearchResponse(BaseModel):
    """Response of search and lookup.

    ``search_id`` must be passed along with any ``tool_id`` from
    ``results`` when executing it.
    """

    search_id: str
    results: list[ToolInfo]
    query: str | None = None
    total: int | None = None
    stats: SearchStats | None = None

    model_config = {"extra": "allow"}


class ExecuteResultData(BaseModel):
    """Result that fit within ``max_data_size``."""

    data: JsonValue

    model_config = {"extra": "allow"}


class ExecuteResultTruncated(BaseModel):
    """Result larger than ``max_data_size``.

    ``full_content_file_url`` stays valid for 120 minutes.
    """

    message: str
    full_content_file_url: str
    truncated_content: str

    model_config = {"extra": "allow"}


ExecuteResult = ExecuteResultData | ExecuteResultTruncated


class ExecuteResponse(BaseModel):
    execution_id: str
    tool_id: str
    parameters: dict[str, JsonValue]
    success: bool
    result: ExecuteResult | None = None
    error_message: str | None = None
    execution_time: float | None = None
    created_at: str

    model_config = {"extra": "allow"}


def parse_execute_result(raw: Any) -> ExecuteResult | None:
    """Classify a raw ``result`` payload into one of its two shapes.

    Returns None when the payload matches neither shape.
    """
    if not isinstance(raw, dict):
        return None
    if "truncated_content" in raw and "full_content_file_url" in raw:
        return ExecuteResultTruncated(
            message=str(raw.get("message", "")),
            full_content_file_url=str(raw["full_content_file_url"]),
            truncated_content=str(raw["truncated_content"]),
        )
    if "data" in raw:
        return ExecuteResultData(data=raw["data"])
    return None
