"""
Supplier endpoints.

Suppliers are the companies a product is normally bought from.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_catalog
from src.application.dto.mappers import to_supplier_response
from src.application.dto.requests import SupplierCreateRequest, SupplierUpdateRequest
from src.application.dto.responses import (
    ErrorResponse,
    SupplierListResponse,
    SupplierResponse,
)
from src.core.services import CatalogService

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    search: str | None = Query(default=None, description="Substring of name, contact or email"),
    catalog: CatalogService = Depends(get_catalog),
) -> SupplierListResponse:
    suppliers = await catalog.list_suppliers(search)
    return SupplierListResponse(
        suppliers=[to_supplier_response(s) for s in suppliers],
        total=len(suppliers),
    )


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_supplier(
    request: SupplierCreateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> SupplierResponse:
    return to_supplier_response(await catalog.create_supplier(**request.model_dump()))


@router.get("/{supplier_id}", response_model=SupplierResponse, responses={404: {"model": ErrorResponse}})
async def get_supplier(
    supplier_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> SupplierResponse:
    return to_supplier_response(await catalog.get_supplier(supplier_id))


@router.put(
    "/{supplier_id}",
    response_model=SupplierResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_supplier(
    supplier_id: int,
    request: SupplierUpdateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> SupplierResponse:
    supplier = await catalog.update_supplier(supplier_id, request.model_dump(exclude_unset=True))
    return to_supplier_response(supplier)


@router.delete(
    "/{supplier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_supplier(
    supplier_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> Response:
    """Delete a supplier. Its products keep existing without one."""
    await catalog.delete_supplier(supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
