import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.colors import router as colors_router
from .api.patterns import router as patterns_router
from .settings import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Stitch Pattern Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(patterns_router, prefix="/api/v1", tags=["patterns"])
app.include_router(colors_router, prefix="/api/v1", tags=["colors"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
