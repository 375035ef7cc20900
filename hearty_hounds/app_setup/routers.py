"""
Registre central des routers (API v1, health).
"""
from fastapi import FastAPI

from hearty_hounds.addresses import views as addresses_views
from hearty_hounds.cart import views as cart_views
from hearty_hounds.health.router import router as health_router
from hearty_hounds.orders import views as orders_views
from hearty_hounds.payments import views as payments_views
from hearty_hounds.shipping import views as shipping_views

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(payments_views.router)
    app.include_router(shipping_views.router)
    app.include_router(orders_views.router)
    app.include_router(addresses_views.router)
    app.include_router(cart_views.router)
    # Health & monitoring
    app.include_router(health_router)
