from fastapi import FastAPI
from datetime import datetime
from storefront.core.logger import logger
from storefront.middleware.metrics import MetricsMiddleware, empty_metrics
from storefront.routes import system
from storefront.database.connection import Base, engine
from storefront.models import order, product, user  # noqa: F401  (register tables)
from storefront.routes.auth import router as auth_router
from storefront.routes.products import router as product_router
from storefront.routes.auctions import router as auctions_router
from storefront.routes.orders import router as orders_router
from storefront.routes.analytics import router as analytics_router

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Storefront: Catalog, Checkout & Auctions")

app.add_middleware(MetricsMiddleware)


app.include_router(auth_router)
app.include_router(product_router)
app.include_router(auctions_router)
app.include_router(orders_router)
app.include_router(analytics_router)
app.include_router(system.router)

@app.on_event("startup")
async def startup_event():
    app.state.start_time = datetime.utcnow()
    app.state.metrics = empty_metrics()
    logger.info("Storefront API started.")
