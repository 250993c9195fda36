# app/main.py
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from app.middleware import install_middlewares
from app.logging_config import setup_logging
from app.routers import health, meta
from app.routers.generate_sow import router as generate_sow_router
from app.routers.rfp import router as rfp_router

setup_logging()
app = FastAPI(
    title="GMDC RFP Generator",
    description="RFP document generation with AI-drafted scope of work for GMDC tenders",
    version="1.0.0",
)
install_middlewares(app)

# Routers
app.include_router(health.router)
app.include_router(meta.router)
app.include_router(generate_sow_router)
app.include_router(rfp_router)


@app.get("/")
def root():
    return {"app": "gmdc_rfp_generator", "status": "running", "version": "1.0.0", "docs": "/docs"}
