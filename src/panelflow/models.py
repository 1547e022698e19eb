"""Page and panel snapshots exchanged with the persistence layer.

These models describe one version of an issue's content as it is handed to
the diff engine and the pacing analyzer. Both camelCase and snake_case keys
are accepted so payloads can come straight from the web client or the
database.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TextBlock(BaseModel):
    """A dialogue balloon, caption or sound effect."""

    model_config = ConfigDict(extra="ignore")

    text: str = ""
    character: str | None = None

    @field_validator("text", mode="before")
    @classmethod
    def none_to_blank(cls, v: Any) -> Any:
        """Treat null text as an empty balloon."""
        return "" if v is None else v


class PageType(str, Enum):
    """Layout of a page."""

    SINGLE = "SINGLE"
    SPLASH = "SPLASH"
    SPREAD_LEFT = "SPREAD_LEFT"
    SPREAD_RIGHT = "SPREAD_RIGHT"


class PanelData(BaseModel):
    """A single panel of a page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    visual_description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("visual_description", "visualDescription"),
    )
    dialogue: list[TextBlock] = Field(
        default_factory=list,
        validation_alias=AliasChoices("dialogue", "dialogue_blocks", "dialogueBlocks"),
    )
    captions: list[TextBlock] = Field(default_factory=list)
    sound_effects: list[TextBlock] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sound_effects", "soundEffects"),
    )

    @field_validator("dialogue", "captions", "sound_effects", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat a null list as an empty one."""
        return [] if v is None else v


class PageData(BaseModel):
    """A page with its panels in reading order."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    page_number: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("page_number", "pageNumber"),
    )
    page_type: PageType = Field(
        default=PageType.SINGLE,
        validation_alias=AliasChoices("page_type", "pageType"),
    )
    panels: list[PanelData] = Field(default_factory=list)

    @field_validator("panels", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat a null panel list as an empty one."""
        return [] if v is None else v

    @field_validator("page_type", mode="before")
    @classmethod
    def default_page_type(cls, v: Any) -> Any:
        """Pages without a layout are single pages."""
        return PageType.SINGLE if v is None else v

    @property
    def is_splash_or_spread(self) -> bool:
        return self.page_type is not PageType.SINGLE


class SceneData(BaseModel):
    """A scene and the pages it spans."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    title: str | None = None
    name: str | None = None
    pages: list[PageData] = Field(default_factory=list)

    @field_validator("pages", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def display_name(self) -> str:
        """Title, then name, then a placeholder."""
        return self.title or self.name or "Untitled Scene"


class ActData(BaseModel):
    """An act and its scenes in reading order."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    scenes: list[SceneData] = Field(default_factory=list)

    @field_validator("scenes", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v
