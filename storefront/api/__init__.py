# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import admin, carts, health, orders, pages, payments, products, support


def include_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(support.router)
    app.include_router(payments.router)
    app.include_router(admin.router)
    app.include_router(pages.router)
