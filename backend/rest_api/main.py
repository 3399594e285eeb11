"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from rest_api.core import configure_cors, lifespan, register_middlewares
from rest_api.routers.admin import router as admin_router
from rest_api.routers.auth import router as auth_router
from rest_api.routers.diner import dietary_router, recommendations_router
from rest_api.routers.feedback import router as feedback_router
from rest_api.routers.menu import router as menu_router
from rest_api.routers.public import content_router, health_router
from rest_api.routers.restaurants import router as restaurants_router
from rest_api.routers.user import router as user_router
from shared.config.settings import settings
from shared.config.logging import rest_api_logger as logger
from shared.security.rate_limit import limiter, rate_limit_exceeded_handler


# Create FastAPI application
app = FastAPI(
    title="VividPlate REST API",
    description="Digital menus, dietary recommendations and subscriptions for restaurants",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are a 400, like every other input error."""
    errors = [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.debug("Request validation failed", path=request.url.path, errors=len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request data", "errors": errors},
    )


register_middlewares(app)
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(restaurants_router)
app.include_router(menu_router)
app.include_router(dietary_router)
app.include_router(recommendations_router)
app.include_router(feedback_router)
app.include_router(content_router)
app.include_router(admin_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rest_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )
