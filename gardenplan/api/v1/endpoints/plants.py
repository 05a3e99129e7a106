from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from gardenplan.schemas.garden import Plant, normalize_plant_type
from gardenplan.services.compatibility import DEFAULT_TABLE
from gardenplan.services.plant_catalog import CATALOG, plant_from_catalog

router = APIRouter(prefix="/plants", tags=["plants"])


class CompatibilityRead(BaseModel):
    type_a: str
    type_b: str
    companions: bool
    incompatible: bool
    spacing_factor: float


@router.get("/catalog", response_model=list[Plant])
async def list_catalog():
    """Catalog defaults for every known plant type, with the type as id."""
    return [plant_from_catalog(plant_type, plant_type) for plant_type in sorted(CATALOG)]


@router.get("/catalog/{plant_type}", response_model=Plant)
async def get_catalog_entry(plant_type: str):
    try:
        return plant_from_catalog(plant_type, plant_type)
    except KeyError:
        raise HTTPException(status_code=404, detail="Plant type not found")


@router.get("/compatibility", response_model=CompatibilityRead)
async def get_compatibility(
    a: str = Query(..., description="First plant type"),
    b: str = Query(..., description="Second plant type"),
):
    return CompatibilityRead(
        type_a=normalize_plant_type(a),
        type_b=normalize_plant_type(b),
        companions=DEFAULT_TABLE.are_companions(a, b),
        incompatible=DEFAULT_TABLE.are_incompatible(a, b),
        spacing_factor=DEFAULT_TABLE.spacing_factor(a, b),
    )
