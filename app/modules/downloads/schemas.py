from pydantic import BaseModel
from typing import Optional


class DownloadRequest(BaseModel):
    fileName: Optional[str] = None
    template_slug: Optional[str] = None


class FreeDownloadRequest(BaseModel):
    template_slug: Optional[str] = None


class DownloadResponse(BaseModel):
    ok: bool = True
    url: Optional[str] = None
    expires_in: Optional[int] = None
