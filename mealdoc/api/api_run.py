from fastapi import FastAPI

import logging

from mealdoc.infra.fonts import get_font_faces
from mealdoc.utilities.config import DEBUG, LOG_LEVEL

# Routers
from mealdoc.api.routes import export

# Logging
logging.basicConfig(level=logging.DEBUG if DEBUG else LOG_LEVEL)
logger = logging.getLogger("mealdoc_app")

# Initialize FastAPI app
app = FastAPI(title="Meal Plan Document API")

# Include routers
app.include_router(export.router)


@app.on_event("startup")
def _startup_fonts():
    """Prepare font resources once so the first export does not pay for it."""
    regular, bold = get_font_faces()
    logger.info("PDF fonts ready: %s / %s", regular, bold)


@app.get("/api/health")
def health():
    regular, _ = get_font_faces()
    return {"status": "ok", "font": regular}
