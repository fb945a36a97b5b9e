# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""AI stylist backed by the OpenAI chat completions API.

Every call asks the model for a JSON object and validates it against a
pydantic schema. Failures surface as ``ApiError``s so routes can let them
propagate to the central error handler.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from beartype import beartype
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from ..core.errors import ApiError
from ..models.outfit import Outfit
from ..models.wardrobe import WardrobeItem
from ..schemas.recommendations import OccasionOutfit, OutfitRecommendations, StyleProfile

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

SYSTEM_PROMPT = (
    "You are a personal stylist. You only suggest outfits made from the "
    "wardrobe items you are given, referring to them by their numeric id. "
    "Always answer with a single JSON object and nothing else."
)


def _summarize_items(items: Sequence[WardrobeItem]) -> list[dict[str, Any]]:
    return [
        {
            "id": item.id,
            "name": item.name,
            "category": item.category.value,
            "subcategory": item.subcategory,
            "color": item.color,
            "season": item.season.value if item.season else None,
            "tags": item.tags,
        }
        for item in items
    ]


class AIStylist:
    """Outfit recommendations and style analysis."""

    @beartype
    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o",
        *,
        client: Any = None,
    ) -> None:
        self._model = model
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key)

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @beartype
    async def get_outfit_recommendations(
        self,
        wardrobe_items: Sequence[WardrobeItem],
        *,
        weather: str | None = None,
        occasion: str | None = None,
        mood: str | None = None,
    ) -> OutfitRecommendations:
        criteria = {"weather": weather, "occasion": occasion, "mood": mood}
        prompt = (
            "Suggest up to three outfits for these criteria: "
            f"{json.dumps({k: v for k, v in criteria.items() if v})}.\n"
            f"Wardrobe: {json.dumps(_summarize_items(wardrobe_items))}\n"
            'Respond as {"recommendations": [{"name": str, "item_ids": [int], '
            '"reasoning": str, "occasion": str, "mood": str}]}'
        )
        return await self._complete(prompt, OutfitRecommendations)

    @beartype
    async def get_occasion_outfit(
        self, occasion: str, wardrobe_items: Sequence[WardrobeItem]
    ) -> OccasionOutfit:
        prompt = (
            f"Put together one outfit for this occasion: {occasion}.\n"
            f"Wardrobe: {json.dumps(_summarize_items(wardrobe_items))}\n"
            'Respond as {"outfit": {"name": str, "item_ids": [int], '
            '"reasoning": str, "occasion": str}, "tips": [str]}'
        )
        return await self._complete(prompt, OccasionOutfit)

    @beartype
    async def analyze_user_style(
        self,
        wardrobe_items: Sequence[WardrobeItem],
        outfit_history: Sequence[Outfit] = (),
    ) -> StyleProfile:
        history = [
            {"name": outfit.name, "item_ids": outfit.items, "occasion": outfit.occasion}
            for outfit in outfit_history
        ]
        prompt = (
            "Describe this person's personal style.\n"
            f"Wardrobe: {json.dumps(_summarize_items(wardrobe_items))}\n"
            f"Saved outfits: {json.dumps(history)}\n"
            'Respond as {"dominant_styles": [str], "color_palette": [str], '
            '"summary": str, "suggestions": [str]}'
        )
        return await self._complete(prompt, StyleProfile)

    async def _complete(self, prompt: str, schema: type[ResponseT]) -> ResponseT:
        if self._client is None:
            raise ApiError(
                "AI service is not configured", 503, "AI_SERVICE_UNAVAILABLE"
            )

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ApiError("AI service request failed", 502, "AI_SERVICE_ERROR") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ApiError(
                "AI service returned an empty response", 502, "AI_INVALID_RESPONSE"
            )
        try:
            return schema.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"Could not parse AI response as {schema.__name__}: {e}")
            raise ApiError(
                "AI service returned an unexpected response", 502, "AI_INVALID_RESPONSE"
            ) from e
