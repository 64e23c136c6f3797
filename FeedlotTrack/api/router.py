from fastapi import APIRouter
from .lotes import router as lotes_router
from .leituras_cocho import router as leituras_router
from .planejamentos import router as planejamentos_router
from .batidas import router as batidas_router
from .estoque import router as estoque_router

api_router = APIRouter()
api_router.include_router(lotes_router)
api_router.include_router(leituras_router)
api_router.include_router(planejamentos_router)
api_router.include_router(batidas_router)
api_router.include_router(estoque_router)
