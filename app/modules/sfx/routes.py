from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.sfx.schemas import BulkSfxRequest, BulkSfxResponse
from app.modules.sfx.service import SfxService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin", tags=["sfx"])


def get_sfx_service(supabase: Client = Depends(get_supabase)) -> SfxService:
    return SfxService(supabase)


# Sync handler: generation blocks on the ElevenLabs call and the pacing delay
@router.post("/bulk-upload-sfx", response_model=BulkSfxResponse)
def bulk_upload_sfx(
    body: BulkSfxRequest,
    user_data: Dict = Depends(require_admin),
    service: SfxService = Depends(get_sfx_service),
):
    """Generate sound effects with ElevenLabs and publish them as approved templates"""
    return service.bulk_generate(
        body.count,
        body.soundType,
        subcategory_name=body.subcategoryName,
        subcategory_slug=body.subcategorySlug,
    )
