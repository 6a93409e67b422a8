"""Avatar and image host schemas."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AvatarUpdateRequest(BaseModel):
    """Body for POST /avatar/update."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    user_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId", "id"),
        description="Profile id whose avatar is replaced",
    )
    new_public_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("new_public_id", "newPublicId", "public_id", "avatar_public_id"),
        description="Image host identifier of the new avatar",
    )
    new_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("new_url", "newUrl", "avatar_url"),
        description="Public URL of the new avatar",
    )


class AvatarUpdateResponse(BaseModel):
    """Profile representation returned by the store after the update."""

    success: bool = Field(default=True)
    updated: Any = Field(description="Updated profile rows as returned by the store")


class DeleteImageRequest(BaseModel):
    """Body for POST /delete-image."""

    model_config = ConfigDict(extra="ignore")

    public_id: str | None = Field(default=None, description="Image host identifier to delete")
    token: str | None = Field(default=None, description="Delete token when not sent as a header")


class DeleteImageResponse(BaseModel):
    """Raw image host result, e.g. {'result': 'ok'} or {'result': 'not found'}."""

    success: bool = Field(default=True)
    result: dict[str, Any] = Field(default_factory=dict)
