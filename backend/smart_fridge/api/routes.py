from fastapi import APIRouter

from smart_fridge.api.cart import router as cart_router
from smart_fridge.api.health import router as health_router
from smart_fridge.api.ingredients import router as ingredients_router
from smart_fridge.api.llm import router as llm_router
from smart_fridge.api.notifications import router as notifications_router
from smart_fridge.api.orders import router as orders_router
from smart_fridge.api.products import router as products_router
from smart_fridge.api.recipes import router as recipes_router
from smart_fridge.api.stores import router as stores_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(ingredients_router)
router.include_router(recipes_router)
router.include_router(stores_router)
router.include_router(products_router)
router.include_router(cart_router)
router.include_router(orders_router)
router.include_router(notifications_router)
router.include_router(llm_router)
