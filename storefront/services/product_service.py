# storefront/services/product_service.py
import re
import uuid
from datetime import datetime, timezone
from typing import Iterable

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import (
    VIDEO_BUCKET,
    delete_public_url,
    upload_to_storage,
)
from storefront.models.brand import Brand, SubBrand
from storefront.models.product import Classification, Product, ProductImage
from storefront.repositories.brand_repo import BrandRepository
from storefront.repositories.product_repo import PRICE_BANDS, ProductRepository
from storefront.schemas.product import (
    AGE_RANGES,
    AgeGroupCount,
    CategoryCount,
    ClassificationCreate,
    ProductCreate,
    ProductUpdate,
)


# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

# --- Video config ---

MAX_VIDEO_BYTES = 50 * 1024 * 1024  # 50MB per video

ALLOWED_VIDEO_CONTENT_TYPES: dict[str, str] = {
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
}

SORT_OPTIONS = ("name", "price-low", "price-high", "newest")

# Columns that cannot be cleared through a partial update
REQUIRED_FIELDS = {"name", "mrp", "stock_quantity", "is_active"}

FEATURED_LIMIT = 4
TRENDING_LIMIT = 20


def slugify(raw: str, fallback: str = "product") -> str:
    """
    Basic slugification:
      - lowercase
      - non-alphanumeric -> '-'
      - collapse multiple '-'
      - strip leading/trailing '-'
    """
    value = raw.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = re.sub(r"-+", "-", value)
    value = value.strip("-")
    return value or fallback


class ProductService:
    """
    Business logic for the catalog and the admin inventory panel.

    Responsibilities:
      - catalog browsing (search, filters, sort, home-page sections)
      - slug generation & uniqueness
      - validation beyond pydantic
      - image upload/delete orchestration with Supabase Storage
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository, brand_repo: BrandRepository):
        self.repo = repo
        self.brand_repo = brand_repo

    # ----- Helpers -----

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """First free slug among base, base-2, base-3, ..."""
        if self.repo.get_by_slug(session, base_slug) is None:
            return base_slug
        suffix = 2
        while self.repo.get_by_slug(session, f"{base_slug}-{suffix}") is not None:
            suffix += 1
        return f"{base_slug}-{suffix}"

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def _resolve_brand(
        self,
        session: Session,
        brand_id: uuid.UUID | None,
        sub_brand_id: uuid.UUID | None,
    ) -> tuple[Brand | None, SubBrand | None]:
        """
        Load the picked brand and sub-brand; the sub-brand must be one
        of the brand's own lines.
        """
        brand = None
        if brand_id is not None:
            brand = self.brand_repo.get_brand(session, brand_id)
            if brand is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Brand does not exist",
                )
        if sub_brand_id is None:
            return brand, None

        sub_brand = self.brand_repo.get_subbrand(session, sub_brand_id)
        if sub_brand is None or brand is None or sub_brand.brand_id != brand.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sub-brand does not belong to the selected brand",
            )
        return brand, sub_brand

    # ----- Catalog -----

    def browse(
        self,
        session: Session,
        *,
        search: str | None = None,
        category: str | None = None,
        age_range: str | None = None,
        price: str | None = None,
        sort: str = "name",
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
    ) -> list[Product]:
        """
        Catalog browser: free-text search over name/brand/SKU code,
        category / age / MRP band filters, and one of the sort options.

        "all" (the UI's default select value) means no filter.
        """
        if price == "all":
            price = None
        if category == "all":
            category = None
        if age_range == "all":
            age_range = None

        if price is not None and price not in PRICE_BANDS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown price band '{price}'",
            )
        if sort not in SORT_OPTIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown sort option '{sort}'",
            )

        return self.repo.search(
            session,
            search=search,
            category=category,
            age_range=age_range,
            price_band=price,
            sort=sort,
            skip=skip,
            limit=limit,
            only_active=only_active,
        )

    def featured(self, session: Session) -> list[Product]:
        return self.repo.newest_active(session, FEATURED_LIMIT)

    def trending(self, session: Session) -> list[Product]:
        return self.repo.search(session, sort="newest", limit=TRENDING_LIMIT)

    def categories(self, session: Session) -> list[CategoryCount]:
        return [
            CategoryCount(category=name, product_count=int(count))
            for name, count in self.repo.category_counts(session)
        ]

    def age_groups(self, session: Session) -> list[AgeGroupCount]:
        """
        Product counts for every storefront age band (zero when empty).
        """
        counts = self.repo.age_range_counts(session)
        return [
            AgeGroupCount(age_range=age, product_count=counts.get(age, 0))
            for age in AGE_RANGES
        ]

    # ----- Products -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> Product:
        """
        Create a new product with a unique slug.

        - If slug is provided => slugify & ensure unique.
        - Else => slugify from name & ensure unique.
        """
        brand, sub_brand = self._resolve_brand(
            session, payload.brand_id, payload.sub_brand_id
        )
        base_slug = slugify(payload.slug or payload.name)
        slug = self._ensure_unique_slug(session, base_slug)

        product = Product(
            **payload.model_dump(exclude={"slug"}),
            slug=slug,
            brand=brand.name if brand else None,
            sub_brand=sub_brand.name if sub_brand else None,
        )
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        - If slug is changed, enforce uniqueness.
        - discount_price must stay below mrp after the merge.
        - Changing the brand drops a sub-brand that was not re-picked.
        """
        product = self.get_product(session, product_id)
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }

        if "brand_id" in changes or "sub_brand_id" in changes:
            brand_id = changes.get("brand_id", product.brand_id)
            if "sub_brand_id" in changes:
                sub_brand_id = changes["sub_brand_id"]
            elif brand_id != product.brand_id:
                sub_brand_id = None
            else:
                sub_brand_id = product.sub_brand_id
            brand, sub_brand = self._resolve_brand(session, brand_id, sub_brand_id)
            changes.update(
                brand_id=brand_id,
                brand=brand.name if brand else None,
                sub_brand_id=sub_brand_id,
                sub_brand=sub_brand.name if sub_brand else None,
            )

        mrp = changes.get("mrp", product.mrp)
        discount_price = changes.get("discount_price", product.discount_price)
        if discount_price is not None and discount_price >= mrp:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="discount_price must be lower than mrp",
            )

        new_slug = changes.pop("slug", None)
        if new_slug is not None:
            new_base_slug = slugify(new_slug)
            if new_base_slug != product.slug:
                product.slug = self._ensure_unique_slug(session, new_base_slug)

        for field, value in changes.items():
            setattr(product, field, value)

        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def set_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        stock_quantity: int,
    ) -> Product:
        """
        Overwrite the stock count (inventory panel quick edit).
        """
        product = self.get_product(session, product_id)
        product.stock_quantity = stock_quantity
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def delete_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> None:
        """
        Delete a product and all its gallery images, then clean up Storage.

        Rows go first in one commit. Storage files are removed afterwards,
        best-effort, so a failed delete never leaves a product whose
        media is already gone.
        """
        product = self.get_product(session, product_id)
        if self.repo.is_ordered(session, product_id):
            # Order lines keep pointing at the product
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product has been ordered; deactivate it instead",
            )
        urls = [product.hero_image_url, product.video_url]
        urls += [
            img.image_url
            for img in self.repo.list_images_for_product(session, product_id)
        ]

        self.repo.delete(session, product)

        for url in urls:
            if url:
                delete_public_url(url)

    # ----- Images -----

    def _store(
        self,
        product: Product,
        name: str,
        content_type: str,
        file_bytes: bytes,
    ) -> str:
        """Validate, upload under products/<id>/ and return the public URL."""
        ext = self._validate_and_get_ext(content_type, file_bytes)
        return upload_to_storage(
            f"products/{product.id}/{name}.{ext}", file_bytes, content_type
        )

    def set_hero_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        product = self.get_product(session, product_id)
        self._validate_and_get_ext(content_type, file_bytes)

        # The old hero may use a different extension, so upsert alone
        # would leave it behind.
        if product.hero_image_url:
            delete_public_url(product.hero_image_url)

        product.hero_image_url = self._store(product, "hero", content_type, file_bytes)
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    # ----- Video -----

    def set_video(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        """
        Upload or replace the product's demo video.

        MP4, WEBM or MOV up to 50MB. Each upload gets a fresh object name
        so browsers never replay a cached copy of the old file.
        """
        product = self.get_product(session, product_id)
        if content_type not in ALLOWED_VIDEO_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported video type. Allowed: MP4, WEBM, MOV.",
            )
        if len(file_bytes) > MAX_VIDEO_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Video too large (max 50MB).",
            )
        ext = ALLOWED_VIDEO_CONTENT_TYPES[content_type]

        if product.video_url:
            delete_public_url(product.video_url)

        product.video_url = upload_to_storage(
            f"{product.id}/{uuid.uuid4()}.{ext}",
            file_bytes,
            content_type,
            bucket=VIDEO_BUCKET,
        )
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def remove_video(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.get_product(session, product_id)
        if not product.video_url:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product has no video",
            )
        old_url = product.video_url
        product.video_url = None
        product.updated_at = datetime.now(timezone.utc)
        product = self.repo.update(session, product)
        delete_public_url(old_url)
        return product

    def list_images(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        self.get_product(session, product_id)
        return self.repo.list_images_for_product(session, product_id)

    def add_gallery_images(
        self,
        session: Session,
        product_id: uuid.UUID,
        files: Iterable[tuple[str, bytes]],
    ) -> list[ProductImage]:
        """
        Append (content_type, bytes) uploads to the end of the gallery.
        The whole batch is checked before anything reaches Storage.
        """
        product = self.get_product(session, product_id)
        files = list(files)
        for content_type, file_bytes in files:
            self._validate_and_get_ext(content_type, file_bytes)

        position = len(self.repo.list_images_for_product(session, product.id))
        added: list[ProductImage] = []
        for offset, (content_type, file_bytes) in enumerate(files):
            stem = f"gallery/{uuid.uuid4()}"
            image = ProductImage(
                product_id=product.id,
                image_url=self._store(product, stem, content_type, file_bytes),
                display_order=position + offset,
            )
            added.append(self.repo.create_image(session, image))
        return added

    def remove_gallery_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        image_id: uuid.UUID,
    ) -> None:
        image = self.repo.get_image_by_id(session, image_id)
        if image is None or image.product_id != product_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Image not found for this product",
            )
        delete_public_url(image.image_url)
        self.repo.delete_image(session, image)

    # ----- Collections -----

    def list_collections(self, session: Session) -> list[Classification]:
        return self.repo.list_classifications(session)

    def collection_products(self, session: Session, slug: str) -> list[Product]:
        classification = self.repo.get_classification_by_slug(session, slug)
        if not classification:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Collection not found",
            )
        return self.repo.list_in_classification(session, classification.id)

    def create_collection(
        self,
        session: Session,
        payload: ClassificationCreate,
    ) -> Classification:
        slug = slugify(payload.slug or payload.name, fallback="collection")
        if self.repo.get_classification_by_slug(session, slug):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Collection slug already exists",
            )
        classification = Classification(
            name=payload.name,
            slug=slug,
            description=payload.description,
        )
        return self.repo.create_classification(session, classification)

    def set_product_collections(
        self,
        session: Session,
        product_id: uuid.UUID,
        classification_ids: list[uuid.UUID],
    ) -> list[Classification]:
        """
        Replace the collections a product belongs to.
        Unknown ids are rejected as a whole.
        """
        self.get_product(session, product_id)
        unique_ids = list(dict.fromkeys(classification_ids))
        found = self.repo.get_classifications(session, unique_ids)
        if len(found) != len(unique_ids):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="One or more collections do not exist",
            )
        self.repo.set_classifications(session, product_id, unique_ids)
        return found
