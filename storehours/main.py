from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storehours.core.config import settings
from storehours.core.logging import setup_logging
from storehours.api.v1.api import router as api_v1_router

setup_logging()

app = FastAPI(title="Store Hours API", version="0.1.0")

# set up CORS so the storefront can talk to us
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# mount our API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.APP_ENV}
