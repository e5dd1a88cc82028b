"""
Astronomy picture carousel.

Images come from the APOD API, one request per day. Requests are issued
together; a failing day is dropped from the result instead of failing the
batch. There is no request timeout beyond aiohttp's default.
"""
import asyncio
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger
from pydantic import BaseModel

from portal.core.config import SpaceSettings


class SpaceImage(BaseModel):
    url: str
    title: str
    explanation: str = ""


DEFAULT_IMAGES = [
    {"url": "https://images.unsplash.com/photo-1446776653964-20c1d3a81b06?w=1200", "title": "Galaxy Exploration", "explanation": "Deep space"},
    {"url": "https://images.unsplash.com/photo-1419242902214-272b3f66ee7a?w=1200", "title": "Cosmic Universe", "explanation": "Vast cosmos"},
    {"url": "https://images.unsplash.com/photo-1462331940025-496dfbfc7564?w=1200", "title": "Space Nebula", "explanation": "Beautiful nebula"},
]


class SpaceService:
    def __init__(self, settings: Optional[SpaceSettings] = None):
        self.settings = settings or SpaceSettings()
        self.images: List[SpaceImage] = []
        self.current_index = 0

    async def load_space_images(self) -> List[SpaceImage]:
        dates = [(date.today() - timedelta(days=i)).isoformat() for i in range(self.settings.days)]
        try:
            async with aiohttp.ClientSession() as session:
                responses = await asyncio.gather(
                    *(self._fetch_day(session, day) for day in dates),
                    return_exceptions=True,
                )
        except Exception as e:
            logger.error(f"Error loading space images: {e}")
            self.images = self.get_default_images()
            self.current_index = 0
            return self.images

        images = []
        for day, response in zip(dates, responses):
            if isinstance(response, BaseException):
                logger.debug(f"APOD {day} skipped: {response}")
                continue
            if response and response.get("url") and response.get("title"):
                images.append(SpaceImage(
                    url=response.get("hdurl") or response["url"],
                    title=response["title"],
                    explanation=response.get("explanation", ""),
                ))

        self.images = images[: self.settings.limit]
        self.current_index = 0
        logger.info(f"Loaded {len(self.images)} space images")
        return self.images

    async def _fetch_day(self, session: aiohttp.ClientSession, day: str) -> Dict[str, Any]:
        params = {"api_key": self.settings.api_key, "date": day}
        async with session.get(self.settings.apod_url, params=params) as response:
            response.raise_for_status()
            return await response.json()

    @staticmethod
    def get_default_images() -> List[SpaceImage]:
        return [SpaceImage.model_validate(item) for item in DEFAULT_IMAGES]

    def get_current_image(self) -> Optional[SpaceImage]:
        if not self.images:
            return None
        return self.images[self.current_index]

    def next_image(self) -> Optional[SpaceImage]:
        if not self.images:
            return None
        self.current_index = (self.current_index + 1) % len(self.images)
        return self.get_current_image()

    def previous_image(self) -> Optional[SpaceImage]:
        if not self.images:
            return None
        self.current_index = (self.current_index - 1) % len(self.images)
        return self.get_current_image()

    def get_images(self) -> List[SpaceImage]:
        return self.images
