# storefront/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    UploadFile,
    status,
)
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.brand_repo import BrandRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    AgeGroupCount,
    CategoryCount,
    ClassificationRead,
    ProductClassificationsUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    ProductImageRead,
    StockUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, BrandRepository())


def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing content-type for {file.filename or 'upload'}",
        )
    return file.content_type, file.file.read()


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    search: str | None = None,
    category: str | None = None,
    age_range: str | None = None,
    price: str | None = None,
    sort: str = "name",
    skip: int = 0,
    limit: int = 50,
    only_active: bool = True,
):
    """
    Catalog browser.

    - Public endpoint.
    - `search` matches name, brand or SKU code (case-insensitive).
    - `price` is an MRP band: 0-500, 500-1000, 1000-2000, 2000-5000, 5000+.
    - `sort`: name (default), price-low, price-high, newest.
    - `only_active=True` hides inactive products by default.
    """
    return service.browse(
        session,
        search=search,
        category=category,
        age_range=age_range,
        price=price,
        sort=sort,
        skip=skip,
        limit=limit,
        only_active=only_active,
    )


@router.get("/featured", response_model=list[ProductRead])
def featured_products(session: Session = Depends(get_session)):
    """Newest active products for the home page."""
    return service.featured(session)


@router.get("/trending", response_model=list[ProductRead])
def trending_products(session: Session = Depends(get_session)):
    return service.trending(session)


@router.get("/categories", response_model=list[CategoryCount])
def list_categories(session: Session = Depends(get_session)):
    """Distinct categories of active products with counts."""
    return service.categories(session)


@router.get("/age-groups", response_model=list[AgeGroupCount])
def list_age_groups(session: Session = Depends(get_session)):
    return service.age_groups(session)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Product detail page. Inactive products are still returned by id."""
    return service.get_product(session, product_id)


@router.get(
    "/{product_id}/images",
    response_model=list[ProductImageRead],
)
def list_product_images(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Gallery in display order."""
    return service.list_images(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Add a product to the catalog. The slug is derived from the name
    unless given, and suffixed -2, -3, ... when taken.
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial edit from the inventory panel. A discount price must stay
    below the MRP it ends up paired with.
    """
    return service.update_product(session, product_id, payload)


@router.patch(
    "/{product_id}/stock",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_stock(
    product_id: uuid.UUID,
    payload: StockUpdate,
    session: Session = Depends(get_session),
):
    """Quick stock correction after a stock take."""
    return service.set_stock(session, product_id, payload.stock_quantity)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Remove a product that was never ordered, with its Storage files.
    Ordered products must be deactivated instead (409).
    """
    service.delete_product(session, product_id)
    return None


@router.put(
    "/{product_id}/collections",
    response_model=list[ClassificationRead],
    dependencies=[Depends(require_admin)],
)
def set_product_collections(
    product_id: uuid.UUID,
    payload: ProductClassificationsUpdate,
    session: Session = Depends(get_session),
):
    """
    Replace the collections a product belongs to (admin only).
    """
    return service.set_product_collections(
        session, product_id, payload.classification_ids
    )


@router.post(
    "/{product_id}/hero-image",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Upload or replace hero image for a product",
)
def upload_hero_image(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Main listing photo. JPEG, PNG or WEBP up to 5MB; the previous
    hero file is removed from Storage.
    """
    content_type, file_bytes = _read_upload(file)
    return service.set_hero_image(session, product_id, content_type, file_bytes)


@router.post(
    "/{product_id}/gallery",
    response_model=list[ProductImageRead],
    dependencies=[Depends(require_admin)],
    summary="Upload one or more gallery images for a product",
)
def upload_gallery_images(
    product_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    session: Session = Depends(get_session),
):
    """
    Append photos to the gallery in upload order. Nothing is uploaded
    unless every file passes the type and size checks.
    """
    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No files uploaded",
        )
    return service.add_gallery_images(
        session, product_id, [_read_upload(f) for f in files]
    )


@router.delete(
    "/{product_id}/gallery/{image_id}",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
    summary="Delete a gallery image by id",
)
def delete_gallery_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """Drop one gallery photo; the Storage file goes too (best-effort)."""
    service.remove_gallery_image(session, product_id, image_id)
    return {"message": "Gallery image deleted successfully"}


@router.post(
    "/{product_id}/video",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Upload or replace the demo video for a product",
)
def upload_video(
    product_id: uuid.UUID,
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    MP4, WEBM or MOV up to 50MB, stored in the product-videos bucket.
    The previous video file is removed from Storage.
    """
    content_type, file_bytes = _read_upload(file)
    return service.set_video(session, product_id, content_type, file_bytes)


@router.delete(
    "/{product_id}/video",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def delete_video(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.remove_video(session, product_id)
