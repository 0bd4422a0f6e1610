import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    NotFoundError,
    PersistenceError,
    RestaurantError,
    ValidationError
)
from app.logging_config import configure_logging
from app.schemas import ErrorResponse
from app.api.v1 import (
    ingredients,
    inventory,
    menus,
    orders,
    analytics,
    financial
)

configure_logging()
logger = logging.getLogger("app.main")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Restaurant ingredient inventory, menu costing and order tracking",
    version="1.0.0",
    debug=settings.DEBUG
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_headers=["*"],
    allow_origins=settings.allowed_origins_list,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
)


def _error_body(exc: RestaurantError) -> dict:
    body = ErrorResponse(code=exc.code, message=exc.message, field=getattr(exc, "field", None))
    return body.model_dump(exclude_none=True)


@app.exception_handler(ValidationError)
def handle_validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content=_error_body(exc))


@app.exception_handler(PersistenceError)
def handle_persistence_error(request: Request, exc: PersistenceError):
    logger.error("persistence error", extra={"path": request.url.path, "error": exc.message})
    return JSONResponse(status_code=500, content=_error_body(exc))


@app.exception_handler(RestaurantError)
def handle_restaurant_error(request: Request, exc: RestaurantError):
    return JSONResponse(status_code=400, content=_error_body(exc))


# Health check
@app.get("/")
def read_root():
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


# Include routers
app.include_router(ingredients.router, prefix=f"{settings.API_V1_PREFIX}/ingredients", tags=["Ingredients"])
app.include_router(inventory.router, prefix=f"{settings.API_V1_PREFIX}/inventory", tags=["Inventory"])
app.include_router(menus.router, prefix=f"{settings.API_V1_PREFIX}/menus", tags=["Menus & Recipes"])
app.include_router(orders.router, prefix=f"{settings.API_V1_PREFIX}/orders", tags=["Orders"])
app.include_router(analytics.router, prefix=f"{settings.API_V1_PREFIX}/analytics", tags=["Analytics"])
app.include_router(financial.router, prefix=f"{settings.API_V1_PREFIX}/financial", tags=["Financial"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
