"""Map stored template asset URLs back to storage object keys."""
from typing import Optional
from urllib.parse import urlparse

LEGACY_PREVIEW_PREFIXES = ("/TEMPLATES/IMAGEPREVIEW/", "/TEMPLATES/VIDEOPREVIEW/")


def to_template_object_path(url: Optional[str], supabase_url: str, bucket: str = "templates") -> Optional[str]:
    """Object path inside the Supabase templates bucket, or None when url is not one of ours.

    Accepts the full public URL, an object path that already starts with
    previews/, and the legacy /TEMPLATES/IMAGEPREVIEW|VIDEOPREVIEW/ local paths.
    """
    if not url or not isinstance(url, str):
        return None
    prefix = f"{(supabase_url or '').rstrip('/')}/storage/v1/object/public/{bucket}/"
    if supabase_url and url.startswith(prefix):
        return url[len(prefix):]
    if url.startswith("previews/"):
        return url
    if url.startswith(LEGACY_PREVIEW_PREFIXES):
        return "previews/" + url[len("/TEMPLATES/"):]
    return None


def to_r2_preview_key(url: Optional[str], previews_domain: str) -> Optional[str]:
    """Object key in the R2 previews bucket for https://<previews_domain>/<key>"""
    if not url or not isinstance(url, str) or not previews_domain:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or parsed.netloc != previews_domain:
        return None
    key = parsed.path.lstrip("/")
    return key or None
