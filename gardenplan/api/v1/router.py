from fastapi import APIRouter

from gardenplan.api.v1.endpoints import layouts, plants, schedules

api_router = APIRouter()

api_router.include_router(layouts.router)
api_router.include_router(plants.router)
api_router.include_router(schedules.router)
