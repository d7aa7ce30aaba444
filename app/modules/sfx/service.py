from supabase import Client
from app.config import settings
from app.modules.categories.service import CategoryService, CATEGORY, SUBCATEGORY
from app.modules.sfx import prompts
from app.modules.sfx.elevenlabs import ElevenLabsClient
from app.modules.templates.r2_storage import R2Storage
from app.core.utils import slugify
from typing import Dict, Any, List, Optional
from fastapi import HTTPException
import logging
import re
import time

logger = logging.getLogger(__name__)

SFX_CATEGORY = {
    "name": "Sound Effects",
    "slug": "sound-effects",
    "description": "Professional sound effects for videos, games, and multimedia projects",
    "icon": "Volume2",
}
MIN_DURATION = 2.0
MAX_DURATION = 5.0


def effect_duration(index: int) -> float:
    """2s to 5s, stepping 0.3s over every ten items"""
    return min(MIN_DURATION + (index % 10) * 0.3, MAX_DURATION)


def subcategory_identity(sound_type: str, name: Optional[str] = None, slug: Optional[str] = None) -> Dict[str, str]:
    name = name or (sound_type[:1].upper() + sound_type[1:].replace("-", " "))
    slug = slug or re.sub(r"\s+", "-", sound_type.lower())
    return {"name": name, "slug": slug}


def next_number(base_slug: str, existing_slugs: List[str]) -> int:
    """One past the highest '<base_slug>-<n>' already taken"""
    pattern = re.compile(rf"^{re.escape(base_slug)}-(\d+)$")
    numbers = [int(m.group(1)) for m in (pattern.match(s or "") for s in existing_slugs) if m]
    return max(numbers, default=0) + 1


def audio_keys(category_slug: str, subcategory_slug: str, folder: str, filename: str) -> Dict[str, str]:
    """R2 object keys: previews are namespaced under preview/audio, sources are not"""
    path = "/".join(p for p in (category_slug, subcategory_slug, folder, filename) if p)
    return {"preview": f"preview/audio/{path}", "source": path}


class SfxService:
    def __init__(self, supabase: Client, generator: Optional[ElevenLabsClient] = None,
                 storage: Optional[R2Storage] = None, delay_seconds: Optional[float] = None):
        self.supabase = supabase
        self.categories = CategoryService(supabase)
        self.generator = generator or ElevenLabsClient()
        self.storage = storage
        self.delay_seconds = settings.sfx_generation_delay_seconds if delay_seconds is None else delay_seconds

    def _storage(self) -> R2Storage:
        if self.storage is None:
            if not settings.r2_configured:
                raise HTTPException(status_code=500, detail="R2 storage is not configured")
            self.storage = R2Storage()
        return self.storage

    def _find(self, table: str, slug: str, category_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        query = self.supabase.table(table).select("id, slug").eq("slug", slug)
        if category_id:
            query = query.eq("category_id", category_id)
        result = query.maybe_single().execute()
        return result.data if result else None

    def get_or_create_category(self) -> Dict[str, Any]:
        try:
            existing = self._find("categories", SFX_CATEGORY["slug"])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if existing:
            return existing
        logger.info("Creating Sound Effects category")
        return self.categories.create_node(CATEGORY, **SFX_CATEGORY)

    def get_or_create_subcategory(self, category_id: str, name: str, slug: str) -> Dict[str, Any]:
        try:
            existing = self._find("subcategories", slug, category_id=category_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if existing:
            return existing
        logger.info(f"Creating subcategory {slug} under {category_id}")
        return self.categories.create_node(
            SUBCATEGORY,
            name=name,
            slug=slug,
            description=f"{name} sound effects for videos, games, and multimedia projects",
            parent_id=category_id,
        )

    def next_available_number(self, base_slug: str) -> int:
        rows = self.supabase.table("templates")\
            .select("slug")\
            .like("slug", f"{base_slug}-%")\
            .execute().data or []
        return next_number(base_slug, [row.get("slug") for row in rows])

    def _generate_one(self, index: int, sound_type: str, category: Dict[str, Any],
                      subcategory: Dict[str, Any]) -> Dict[str, Any]:
        prompt = prompts.prompt_at(sound_type, index)
        descriptive_name = prompts.name_from_prompt(prompt)
        base_slug = slugify(descriptive_name)
        number = self.next_available_number(base_slug)
        name = f"{descriptive_name} {number}"
        slug = f"{base_slug}-{number}"

        logger.info(f"Generating sound effect {index + 1}: {name} (slug: {slug})")
        audio = self.generator.generate_sound_effect(prompt, effect_duration(index))

        keys = audio_keys(category["slug"], subcategory["slug"], slugify(name), f"{slug}.mp3")
        storage = self._storage()
        audio_url = storage.upload_preview(audio, keys["preview"], "audio/mpeg")
        source_key = storage.upload_source(audio, keys["source"], "audio/mpeg")

        label = sound_type.replace("-", " ")
        self.supabase.table("templates").insert({
            "slug": slug,
            "name": name,
            "subtitle": f"Professional {label} sound effect",
            "description": f"High-quality {label} sound effect {prompts.description_for(sound_type)}. Generated using AI technology.",
            "category_id": category["id"],
            "subcategory_id": subcategory["id"],
            "creator_shop_id": settings.sfx_creator_shop_id,
            "audio_preview_path": audio_url,
            "source_path": source_key,
            "features": prompts.FEATURES,
            "software": [],
            "plugins": [],
            "tags": prompts.tags_for(sound_type),
            "status": "approved",
            "is_featured": False,
        }).execute()
        return {"success": True, "name": name, "slug": slug, "audioUrl": audio_url}

    def bulk_generate(self, count: int, sound_type: str, subcategory_name: Optional[str] = None,
                      subcategory_slug: Optional[str] = None) -> Dict[str, Any]:
        """Generate, upload and list count sound effects; one failed item does not stop the rest"""
        identity = subcategory_identity(sound_type, subcategory_name, subcategory_slug)
        category = self.get_or_create_category()
        subcategory = self.get_or_create_subcategory(category["id"], identity["name"], identity["slug"])
        self._storage()

        results = []
        for i in range(count):
            try:
                results.append(self._generate_one(i, sound_type, category, subcategory))
            except Exception as e:
                logger.error(f"Error generating sound effect {i}: {e}")
                results.append({"success": False, "index": i, "error": str(e)})
            if i < count - 1 and self.delay_seconds:
                time.sleep(self.delay_seconds)

        succeeded = sum(1 for r in results if r["success"])
        failed = len(results) - succeeded
        message = f"Generated {succeeded} sound effects"
        if failed:
            message += f", {failed} failed"
        logger.info(message)
        return {
            "ok": True,
            "message": message,
            "results": results,
            "category": {"id": category["id"], "slug": category["slug"]},
            "subcategory": {"id": subcategory["id"], "slug": subcategory["slug"]},
        }
