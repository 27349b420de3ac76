from fastapi import APIRouter, Depends
from garage.api.deps import ADMIN, ENGINEER, get_catalog, require_role
from garage.schemas.parts import PartCreate, PartResponse, PartsResponse, Restock
from garage.services.catalog import CatalogStore

router = APIRouter()

@router.get("", response_model=PartsResponse, dependencies=[Depends(require_role(ADMIN, ENGINEER))])
def list_parts(catalog: CatalogStore = Depends(get_catalog)):
    return {"parts": catalog.list()}

@router.post("", status_code=201, response_model=PartResponse, dependencies=[Depends(require_role(ADMIN))])
def create_part(body: PartCreate, catalog: CatalogStore = Depends(get_catalog)):
    part = catalog.create(body.name, body.category, body.price, body.stock, body.performance)
    return {"part": part}

@router.post("/{part_id}/restock", response_model=PartResponse, dependencies=[Depends(require_role(ADMIN))])
def restock_part(part_id: str, body: Restock, catalog: CatalogStore = Depends(get_catalog)):
    return {"part": catalog.restock(part_id, body.qty)}
