from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum
import logging

from app.config import config
from app.database import close_database
from api.artists import router as artists_router
from api.auth_admin import router as auth_router
from api.contact import router as contact_router
from api.dashboard import router as dashboard_router
from api.exhibitions import router as exhibitions_router
from api.reels import router as reels_router
from api.submissions import router as submissions_router
from api.subscribe import router as subscribe_router
from api.videos import router as videos_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_database()


app = FastAPI(
    title="Midnight Soldiers API",
    description="API du site de la galerie Midnight Soldiers",
    version="1.0.0",
    lifespan=lifespan,
)

# Configuration CORS
allowed_origins = [origin.strip() for origin in config.FRONTEND_URL.split(",") if origin.strip()]

# Si on utilise "*" (wildcard), désactiver credentials
allow_credentials = "*" not in allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router, prefix="/api/admin", tags=["admin-auth"])
app.include_router(dashboard_router, prefix="/api/admin", tags=["admin-dashboard"])
app.include_router(artists_router, prefix="/api/artists", tags=["artists"])
app.include_router(reels_router, prefix="/api/reels", tags=["reels"])
app.include_router(videos_router, prefix="/api/videos", tags=["videos"])
app.include_router(submissions_router, prefix="/api/submissions", tags=["submissions"])
app.include_router(exhibitions_router, prefix="/api/exhibitions", tags=["exhibitions"])
app.include_router(subscribe_router, prefix="/api/subscribe", tags=["subscribe"])
app.include_router(contact_router, prefix="/api/contact", tags=["contact"])

ENDPOINTS = {
    "admin": "/api/admin",
    "artists": "/api/artists",
    "reels": "/api/reels",
    "videos": "/api/videos",
    "exhibitions": "/api/exhibitions",
    "subscribe": "/api/subscribe",
    "contact": "/api/contact",
}


@app.get("/")
async def root():
    return {
        "message": "Midnight Soldiers API - FastAPI",
        "status": "healthy",
        "endpoints": ENDPOINTS,
    }


@app.get("/api")
async def api_root():
    return await root()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "message": "Backend is alive!"}


# Handler pour Vercel
handler = Mangum(app)
