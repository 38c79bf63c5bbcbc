from typing import Sequence

from sqlmodel import Session, select

from api.db.models import Image, ImageBase


def create_image(session: Session, image: ImageBase) -> Image:
    db_image = Image.model_validate(image)
    session.add(db_image)
    session.commit()
    session.refresh(db_image)
    return db_image


def find_by_reference_id_and_image_type(
    session: Session, reference_id: int, image_type: int
) -> Sequence[Image]:
    return session.exec(
        select(Image).where(
            Image.reference_id == reference_id,
            Image.image_type == image_type,
        )
    ).all()


def find_by_image_type_and_reference_id(
    session: Session, image_type: int, reference_id: int
) -> Image | None:
    """Single-image variant, for image types that allow one image per reference."""
    return session.exec(
        select(Image).where(
            Image.image_type == image_type,
            Image.reference_id == reference_id,
        )
        .order_by(Image.image_id)
    ).first()


def find_by_image_url(session: Session, image_url: str) -> Image | None:
    return session.exec(select(Image).where(Image.image_url == image_url)).one_or_none()


def find_by_reference_id(session: Session, reference_id: int) -> Image | None:
    """Lowest-id image for the reference when several share it."""
    return session.exec(
        select(Image)
        .where(Image.reference_id == reference_id)
        .order_by(Image.image_id)
    ).first()
