import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from busbooking.config import settings
from busbooking.exceptions import register_exception_handlers
from busbooking.logging_config import RequestIDMiddleware, setup_logging
from busbooking.auth import router as auth_router
from busbooking.cities import router as cities_router
from busbooking.routes import router as routes_router
from busbooking.trips import router as trips_router, public_router as trips_public_router
from busbooking.fares import router as fares_router
from busbooking.catalog import router as catalog_router

setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Bus Booking Back-Office API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(
    auth_router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    cities_router,
    prefix=f"{settings.API_V1_STR}/cities",
    tags=["Cities"]
)

app.include_router(
    trips_public_router,
    prefix=f"{settings.API_V1_STR}/trips",
    tags=["Trips"]
)

app.include_router(
    routes_router,
    prefix=f"{settings.API_V1_STR}/admin/routes",
    tags=["Admin Routes"]
)

app.include_router(
    trips_router,
    prefix=f"{settings.API_V1_STR}/admin/trips",
    tags=["Admin Trips"]
)

app.include_router(
    fares_router,
    prefix=f"{settings.API_V1_STR}/admin/fares",
    tags=["Admin Fares"]
)

app.include_router(
    catalog_router,
    prefix=f"{settings.API_V1_STR}/admin",
    tags=["Admin Catalog"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Bus Booking Back-Office API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting API server", extra={"environment": settings.ENVIRONMENT})
    uvicorn.run(app, host="0.0.0.0", port=8000)
