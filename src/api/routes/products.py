"""
Product catalog endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_catalog, get_processor
from src.application.dto.mappers import to_ledger_response, to_product_response
from src.application.dto.requests import ProductCreateRequest, ProductUpdateRequest
from src.application.dto.responses import (
    ErrorResponse,
    LedgerCheckResponse,
    ProductListResponse,
    ProductResponse,
)
from src.core.entities.product import ProductFilter
from src.core.services import CatalogService, MovementProcessor

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = Query(default=None, description="Substring of name, SKU or description"),
    supplier_id: int | None = Query(default=None),
    low_stock: bool = Query(default=False, description="Only quantity <= min_stock"),
    active_only: bool = Query(default=False),
    accent_insensitive: bool = Query(default=True),
    catalog: CatalogService = Depends(get_catalog),
) -> ProductListResponse:
    """List products ordered by name."""
    products = await catalog.list_products(
        ProductFilter(
            search=search,
            supplier_id=supplier_id,
            low_stock=low_stock,
            active_only=active_only,
            accent_insensitive=accent_insensitive,
        )
    )
    return ProductListResponse(
        products=[to_product_response(p) for p in products],
        total=len(products),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_product(
    request: ProductCreateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    """Create a product with a generated SKU and zero stock."""
    product = await catalog.create_product(**request.model_dump())
    return to_product_response(product)


@router.get("/{product_id}", response_model=ProductResponse, responses={404: {"model": ErrorResponse}})
async def get_product(
    product_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    return to_product_response(await catalog.get_product(product_id))


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    """Update catalog fields. Stock only changes through movements."""
    product = await catalog.update_product(product_id, request.model_dump(exclude_unset=True))
    return to_product_response(product)


@router.patch(
    "/{product_id}/toggle-active",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def toggle_active(
    product_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> ProductResponse:
    return to_product_response(await catalog.toggle_active(product_id))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> Response:
    """Delete a product together with all of its movements."""
    await catalog.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{product_id}/ledger",
    response_model=LedgerCheckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_ledger(
    product_id: int,
    processor: MovementProcessor = Depends(get_processor),
) -> LedgerCheckResponse:
    """Replay the product's movements and compare with the stored balance."""
    return to_ledger_response(await processor.verify_product_ledger(product_id))
