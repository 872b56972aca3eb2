"""Image tagging via an external vision API."""
import json
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import AsyncOpenAI

from quickbite.core.config import settings
from quickbite.services.menu.base import MenuItem

logger = logging.getLogger(__name__)

MIN_TAG_LENGTH = 3

TAGGING_PROMPT = """List the foods and drinks visible in this image.
Respond with JSON only, in the form {"tags": ["burger", "fries"]}.
Use short, lower-case dish or ingredient names. Return an empty list if there is no food."""


class VisionClient(ABC):
    """External service that describes an image as a list of tags."""

    @abstractmethod
    async def extract_tags(self, image_ref: str) -> List[str]:
        """Return descriptive tags for the image at `image_ref`."""
        pass


class OpenAIVisionClient(VisionClient):
    """Vision client backed by an OpenAI multimodal chat model."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured; image recognition is unavailable")
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model or settings.vision_model

    async def extract_tags(self, image_ref: str) -> List[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": TAGGING_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_ref}},
                    ],
                }
            ],
            temperature=0,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or "{}"
        logger.debug(f"[VISION] Raw response: {content}")

        tags = json.loads(content).get("tags", [])
        return [str(tag) for tag in tags if tag]


def match_tags_to_menu(tags: List[str], menu_items: List[MenuItem]) -> List[MenuItem]:
    """
    Menu items whose name or description mentions one of the tags.

    A tag matches when it is a substring of the item name or description, or
    when the item name is a substring of the tag. Results keep catalog order.
    """
    normalized_tags = [tag.lower().strip() for tag in tags]
    normalized_tags = [tag for tag in normalized_tags if len(tag) >= MIN_TAG_LENGTH]

    matches = []
    for item in menu_items:
        name = item.name.lower()
        description = (item.description or "").lower()
        if any(tag in name or name in tag or tag in description for tag in normalized_tags):
            matches.append(item)
    return matches
