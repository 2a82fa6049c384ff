"""
DIGITAL TEMPLATES : FastAPI app
Démarrer : uvicorn digital_templates.api.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="Digital Templates : Éditeur de blocs", version="0.1.0", docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.on_event("startup")
def startup():
    from ..database import init_db
    init_db()
    log.info("DB initialisée")


@app.get("/health")
def health():
    return {"status": "ok", "service": "digital_templates", "version": "0.1.0"}


from .routes import templates, preview

app.include_router(templates.router)
app.include_router(preview.router)
