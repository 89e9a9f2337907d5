# skillmarket/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillmarket.config import settings
from skillmarket.database import Base, engine
from skillmarket.api import auth, profiles, requests, search, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="SkillMarket API")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)      # /auth/*
app.include_router(profiles.router)  # /profiles/*
app.include_router(users.router)     # /users/*
app.include_router(search.router)    # /search/*
app.include_router(requests.router)  # /requests/*

logger.info("SkillMarket API ready (env=%s)", settings.APP_ENV)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "SkillMarket API is running",
        "version": "1.0.0",
    }
