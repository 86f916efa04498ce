"""Game catalog Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class GameDescriptor(BaseModel):
    """Read-only metadata for one game, as listed in the catalog file."""
    id: str = Field(min_length=1)
    display_name: str = Field(alias="name")
    description: str
    system_instruction: str = Field(alias="systemPrompt")
    thumbnail_ref: str = Field(alias="thumbnailUrl")

    model_config = {"frozen": True, "populate_by_name": True}


class CatalogLoaded(BaseModel):
    ok: Literal[True] = True
    games: list[GameDescriptor]


class CatalogLoadFailed(BaseModel):
    ok: Literal[False] = False
    error: str


CatalogLoadResult = CatalogLoaded | CatalogLoadFailed


class GamesResponse(BaseModel):
    games: list[GameDescriptor]
