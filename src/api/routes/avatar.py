"""Avatar and image host API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query

from src.api.deps import check_delete_token, require_avatar_key
from src.api.middleware.error_handler import ClientError
from src.schemas.avatar import (
    AvatarUpdateRequest,
    AvatarUpdateResponse,
    DeleteImageRequest,
    DeleteImageResponse,
)
from src.services.avatar_service import AvatarService
from src.services.image_service import ImageService

router = APIRouter(tags=["avatar"])


@router.post(
    "/avatar/update",
    response_model=AvatarUpdateResponse,
    dependencies=[Depends(require_avatar_key)],
    summary="Replace avatar",
    description="Point a profile at a new avatar and delete the previous image from the CDN.",
)
async def update_avatar(data: AvatarUpdateRequest) -> AvatarUpdateResponse:
    """Replace a profile's avatar.

    Args:
        data: Profile id plus the new image id and URL.

    Returns:
        AvatarUpdateResponse: The updated profile as returned by the store.
    """
    service = AvatarService()
    updated = await service.update_avatar(data.user_id, data.new_public_id, data.new_url)
    return AvatarUpdateResponse(updated=updated)


@router.post(
    "/delete-image",
    response_model=DeleteImageResponse,
    summary="Delete image",
    description="Delete an image from the CDN. Requires the delete token.",
)
async def delete_image(
    data: DeleteImageRequest | None = None,
    public_id: Annotated[str | None, Query(description="Image id when not sent in the body")] = None,
    x_delete_token: Annotated[str | None, Header()] = None,
) -> DeleteImageResponse:
    """Delete an image by its public id.

    Args:
        data: Optional body with public_id and token.
        public_id: Image id from the query string.
        x_delete_token: Delete token header.

    Returns:
        DeleteImageResponse: The image host's raw result.
    """
    body = data or DeleteImageRequest()
    check_delete_token(x_delete_token or body.token)

    target = (body.public_id or public_id or "").strip()
    if not target:
        raise ClientError("public_id required in body or query")

    result = await ImageService().delete_image(target)
    return DeleteImageResponse(result=result)
