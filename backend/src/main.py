"""Main FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import APP_NAME, CORS_ORIGINS, get_settings
from api.routes_timeline import router as timeline_router

app = FastAPI(title=APP_NAME)

# Configure CORS for the show-script front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(timeline_router, prefix="/api")


@app.get("/api/health")
async def healthcheck():
    """Health check endpoint."""
    return {"status": "ok", "settings": get_settings()}
