"""
Expressions Analytics Service - Main Application

Renders Piwik and Google Analytics tracking code for served pages, and
exposes an admin form and JSON API for the stored analytics settings.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from dotenv import load_dotenv
from config import settings
from redis_client import close_redis_client
from routes import router

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_redis_client()


# Initialize FastAPI app
app = FastAPI(title="Expressions Analytics Service", lifespan=lifespan)

# Include all routes from routes.py
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, timeout_keep_alive=60)
