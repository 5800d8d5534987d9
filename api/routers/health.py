# File: api/routers/health.py
from fastapi import APIRouter

from services.prompts import REPORT_TEMPLATE_VERSION

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "ok", "reportTemplateVersion": REPORT_TEMPLATE_VERSION}
