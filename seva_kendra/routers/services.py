# seva_kendra/routers/services.py

from fastapi import APIRouter, Depends, status

from ..catalog import Catalog
from ..dependencies import RecordId, get_catalog, require_identity
from ..schemas import (
    MessageResponse,
    ServiceCreate,
    ServiceListResponse,
    ServiceResponse,
    ServiceUpdate,
    TokenClaims,
)

router = APIRouter(prefix="/services", tags=["Services"])


@router.get("", response_model=ServiceListResponse)
def list_services(catalog: Catalog = Depends(get_catalog)):
    return ServiceListResponse(services=catalog.list_active())


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(service_id: RecordId, catalog: Catalog = Depends(get_catalog)):
    return ServiceResponse(service=catalog.get(service_id))


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    req: ServiceCreate,
    claims: TokenClaims = Depends(require_identity),
    catalog: Catalog = Depends(get_catalog),
):
    return ServiceResponse(message="Service added successfully", service=catalog.create(req))


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: RecordId,
    req: ServiceUpdate,
    claims: TokenClaims = Depends(require_identity),
    catalog: Catalog = Depends(get_catalog),
):
    return ServiceResponse(message="Service updated successfully", service=catalog.update(service_id, req))


@router.delete("/{service_id}", response_model=MessageResponse)
def delete_service(
    service_id: RecordId,
    claims: TokenClaims = Depends(require_identity),
    catalog: Catalog = Depends(get_catalog),
):
    catalog.deactivate(service_id)
    return MessageResponse(message="Service deleted successfully")
