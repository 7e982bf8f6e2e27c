import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from curricula.config import settings

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Curated directory of educational resources with an admin review queue",
    version="0.1.0"
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and register routers
from curricula.routers import admin, auth, resources, submissions

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(resources.router, prefix=settings.API_PREFIX)
app.include_router(submissions.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)

logger.info(f"{settings.PROJECT_NAME} API configured (CORS origins: {settings.BACKEND_CORS_ORIGINS})")

# Root endpoint
@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy"}


def run():
    """Run the API with uvicorn (console script entry point)."""
    import os
    import uvicorn

    uvicorn.run(
        "curricula.main:app",
        host=os.getenv("BACKEND_HOST", "0.0.0.0"),
        port=int(os.getenv("BACKEND_PORT", "8000")),
        reload=settings.DEBUG,
    )
