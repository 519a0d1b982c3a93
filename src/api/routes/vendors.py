"""
Vendor endpoints.

Vendors are the people or shops a given entry was bought from.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_catalog
from src.application.dto.mappers import to_movement_response, to_vendor_response
from src.application.dto.requests import VendorCreateRequest, VendorUpdateRequest
from src.application.dto.responses import (
    ErrorResponse,
    MovementListResponse,
    VendorListResponse,
    VendorResponse,
)
from src.core.services import CatalogService

router = APIRouter(prefix="/api/vendors", tags=["vendors"])


@router.get("", response_model=VendorListResponse)
async def list_vendors(
    search: str | None = Query(default=None, description="Substring of name or phone"),
    catalog: CatalogService = Depends(get_catalog),
) -> VendorListResponse:
    vendors = await catalog.list_vendors(search)
    return VendorListResponse(
        vendors=[to_vendor_response(v) for v in vendors],
        total=len(vendors),
    )


@router.post(
    "",
    response_model=VendorResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_vendor(
    request: VendorCreateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> VendorResponse:
    return to_vendor_response(await catalog.create_vendor(request.name, request.phone))


@router.get("/{vendor_id}", response_model=VendorResponse, responses={404: {"model": ErrorResponse}})
async def get_vendor(
    vendor_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> VendorResponse:
    return to_vendor_response(await catalog.get_vendor(vendor_id))


@router.put(
    "/{vendor_id}",
    response_model=VendorResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_vendor(
    vendor_id: int,
    request: VendorUpdateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> VendorResponse:
    vendor = await catalog.update_vendor(vendor_id, request.model_dump(exclude_unset=True))
    return to_vendor_response(vendor)


@router.delete(
    "/{vendor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_vendor(
    vendor_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> Response:
    """Delete a vendor. Past entries keep their quantities and lose the link."""
    await catalog.delete_vendor(vendor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{vendor_id}/purchases",
    response_model=MovementListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def vendor_purchases(
    vendor_id: int,
    catalog: CatalogService = Depends(get_catalog),
) -> MovementListResponse:
    """Entries bought from this vendor, newest first."""
    records = await catalog.vendor_purchases(vendor_id)
    return MovementListResponse(
        movements=[to_movement_response(r) for r in records],
        total=len(records),
    )
