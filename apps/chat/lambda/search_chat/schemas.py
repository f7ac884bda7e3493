"""Pydantic schemas for the search chat API."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_PROVIDER, MISSING_MESSAGE_ERROR


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str
    model_provider: str = Field(default=DEFAULT_PROVIDER, alias="modelProvider")
    model_name: str | None = Field(default=None, alias="modelName")
    force_search: bool = Field(default=False, alias="forceSearch")

    @field_validator("message")
    @classmethod
    def validate_message(cls, message: str) -> str:
        if not message:
            raise ValueError(MISSING_MESSAGE_ERROR)
        return message


class MetadataEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["metadata"] = "metadata"
    used_search: bool = Field(alias="usedSearch")
    search_tool: str = Field(alias="searchTool")
    search_sources: list[str] = Field(default_factory=list, alias="searchSources")
    is_search_successful: bool = Field(alias="isSearchSuccessful")


class ChunkEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["chunk"] = "chunk"
    data: str


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    data: str


class EndEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["end"] = "end"


StreamEvent = Annotated[
    Union[MetadataEvent, ChunkEvent, ErrorEvent, EndEvent],
    Field(discriminator="type"),
]


class ProviderMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: str
    capable_model: str = Field(alias="capableModel")
    fast_model: str = Field(alias="fastModel")
    search_tool: str = Field(alias="searchTool")
