from fastapi import APIRouter, Depends
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.downloads.schemas import DownloadRequest, FreeDownloadRequest, DownloadResponse
from app.modules.downloads.service import DownloadService
from app.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/download", tags=["downloads"])


def get_download_service(supabase: Client = Depends(get_supabase)) -> DownloadService:
    return DownloadService(supabase)


@router.post("", response_model=DownloadResponse)
async def download(
    body: DownloadRequest,
    current_user: Dict = Depends(get_current_user),
    service: DownloadService = Depends(get_download_service),
):
    """Signed URL for a template source file (active subscribers only)"""
    url = service.subscriber_download(current_user["id"], body.fileName, body.template_slug)
    return DownloadResponse(url=url, expires_in=settings.signed_url_ttl_seconds)


@router.post("/free", response_model=DownloadResponse)
async def free_download(
    body: FreeDownloadRequest,
    current_user: Dict = Depends(get_current_user),
    service: DownloadService = Depends(get_download_service),
):
    """Record a free-template download"""
    url = service.free_download(current_user["id"], body.template_slug)
    return DownloadResponse(url=url, expires_in=settings.signed_url_ttl_seconds if url else None)
