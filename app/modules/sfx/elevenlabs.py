from typing import Optional

import requests

from app.config import settings
import logging

logger = logging.getLogger(__name__)

SOUND_GENERATION_URL = "https://api.elevenlabs.io/v1/sound-generation"
PROMPT_INFLUENCE = 0.3
REQUEST_TIMEOUT = 120


class ElevenLabsError(Exception):
    pass


class ElevenLabsClient:
    """Text-to-sound-effect generation; returns mp3 bytes"""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key or settings.elevenlabs_api_key
        self.session = session or requests.Session()

    def generate_sound_effect(self, prompt: str, duration_seconds: float = 3) -> bytes:
        if not self.api_key:
            raise ElevenLabsError("ELEVENLABS_API_KEY is not set")
        resp = self.session.post(
            SOUND_GENERATION_URL,
            headers={
                "Accept": "audio/mpeg",
                "Content-Type": "application/json",
                "xi-api-key": self.api_key,
            },
            json={
                "text": prompt,
                "duration_seconds": duration_seconds,
                "prompt_influence": PROMPT_INFLUENCE,
            },
            timeout=REQUEST_TIMEOUT,
        )
        if not resp.ok:
            raise ElevenLabsError(f"ElevenLabs API error: {resp.status_code} - {resp.text}")
        logger.debug(f"Generated {len(resp.content)} bytes for prompt '{prompt}'")
        return resp.content
