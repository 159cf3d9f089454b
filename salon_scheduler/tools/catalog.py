from fastapi import APIRouter, Depends

from salon_scheduler.dependencies.services import get_scheduling_store
from salon_scheduler.schemas.catalog import CatalogListResponse
from salon_scheduler.schemas.professional import ProfessionalListResponse
from salon_scheduler.services.store import SchedulingStore

router = APIRouter()


@router.get("/items", response_model=CatalogListResponse)
async def list_catalog_items(store: SchedulingStore = Depends(get_scheduling_store)):
    items = list(store.master_data.iter_items())
    return CatalogListResponse(total=len(items), items=items)


@router.get("/professionals", response_model=ProfessionalListResponse)
async def list_professionals(
    active_only: bool = True,
    store: SchedulingStore = Depends(get_scheduling_store),
):
    items = store.master_data.iter_professionals(active_only=active_only)
    return ProfessionalListResponse(total=len(items), items=items)
