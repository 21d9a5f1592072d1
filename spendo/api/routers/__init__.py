from fastapi import APIRouter

from spendo.api.routers import auth, charts, expenses

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(expenses.router)
api_router.include_router(charts.router)
