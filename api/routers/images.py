from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from api.db import models
from api.db.crud import image as image_crud
from api.utils.auth import get_current_user
from api.utils.dependencies import get_session

router = APIRouter(
    prefix="/images",
    tags=["images"],
    dependencies=[Depends(get_current_user)],
    responses={404: {"description": "Not found"}},
)

image_not_found = HTTPException(
    status_code=status.HTTP_404_NOT_FOUND, detail="Image not found."
)


@router.get("/")
async def get_images(
    session: Annotated[Session, Depends(get_session)],
    reference_id: Annotated[int, Query()],
    image_type: Annotated[int, Query()],
) -> models.ImageResponse:
    images = image_crud.find_by_reference_id_and_image_type(
        session=session, reference_id=reference_id, image_type=image_type
    )
    return models.ImageResponse(images=list(images), count=len(images))


@router.get("/url")
async def get_image_by_url(
    session: Annotated[Session, Depends(get_session)],
    image_url: Annotated[str, Query()],
) -> models.Image:
    image = image_crud.find_by_image_url(session=session, image_url=image_url)
    if image is None:
        raise image_not_found
    return image


@router.get("/reference/{reference_id}")
async def get_image_by_reference(
    reference_id: int,
    session: Annotated[Session, Depends(get_session)],
    image_type: int | None = None,
) -> models.Image:
    if image_type is None:
        image = image_crud.find_by_reference_id(
            session=session, reference_id=reference_id
        )
    else:
        image = image_crud.find_by_image_type_and_reference_id(
            session=session, image_type=image_type, reference_id=reference_id
        )
    if image is None:
        raise image_not_found
    return image
