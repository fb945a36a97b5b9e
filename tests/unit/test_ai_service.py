"""Unit tests for the AI stylist."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from cher_closet.core.errors import ApiError
from cher_closet.models.outfit import Outfit
from cher_closet.models.wardrobe import ClothingCategory, Season, WardrobeItem
from cher_closet.schemas.recommendations import OccasionRequest, RecommendationRequest
from cher_closet.services.ai_service import AIStylist
from tests.fixtures.fakes import chat_completion

WARDROBE = [
    WardrobeItem(
        id=1,
        user_id=1,
        name="Yellow plaid blazer",
        category=ClothingCategory.OUTERWEAR,
        season=Season.FALL,
        tags=["plaid"],
    ),
    WardrobeItem(id=2, user_id=1, name="Plaid skirt", category=ClothingCategory.BOTTOMS),
]


def stub_client(content: str | None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=chat_completion(content))
    return client


class TestRecommendations:
    """Test parsing of model output."""

    @pytest.mark.asyncio
    async def test_outfit_recommendations(self) -> None:
        """Test that recommendations are parsed and the prompt names the items."""
        client = stub_client(
            json.dumps(
                {
                    "recommendations": [
                        {
                            "name": "Clueless classic",
                            "item_ids": [1, 2],
                            "reasoning": "Matching plaid",
                            "confidence": 0.9,
                        }
                    ]
                }
            )
        )
        stylist = AIStylist(None, "gpt-4o", client=client)

        result = await stylist.get_outfit_recommendations(WARDROBE, mood="confident")

        (suggestion,) = result.recommendations
        assert suggestion.name == "Clueless classic"
        assert suggestion.item_ids == [1, 2]
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        prompt = kwargs["messages"][-1]["content"]
        assert '"mood": "confident"' in prompt
        assert "Yellow plaid blazer" in prompt
        assert "weather" not in prompt.split("\n")[0]

    @pytest.mark.asyncio
    async def test_occasion_outfit(self) -> None:
        client = stub_client(
            json.dumps(
                {"outfit": {"name": "Debate day", "item_ids": [1]}, "tips": ["Smile"]}
            )
        )
        stylist = AIStylist(None, client=client)
        occasion = OccasionRequest(occasion="debate", formality="smart", additional_info="indoors")

        result = await stylist.get_occasion_outfit(occasion.describe(), WARDROBE)

        assert result.outfit.name == "Debate day"
        assert result.tips == ["Smile"]
        prompt = client.chat.completions.create.await_args.kwargs["messages"][-1]["content"]
        assert "debate (smart) - indoors" in prompt

    @pytest.mark.asyncio
    async def test_style_analysis_includes_history(self) -> None:
        client = stub_client(
            json.dumps({"dominant_styles": ["preppy"], "summary": "Plaid forward"})
        )
        stylist = AIStylist(None, client=client)
        history = [Outfit(id=9, user_id=1, name="Mall trip", items=[1, 2])]

        profile = await stylist.analyze_user_style(WARDROBE, history)

        assert profile.dominant_styles == ["preppy"]
        assert profile.color_palette == []
        prompt = client.chat.completions.create.await_args.kwargs["messages"][-1]["content"]
        assert "Mall trip" in prompt


class TestFailures:
    """Test failure mapping to ApiError."""

    @pytest.mark.asyncio
    async def test_not_configured(self) -> None:
        stylist = AIStylist(None)

        assert not stylist.is_configured
        with pytest.raises(ApiError) as exc_info:
            await stylist.get_outfit_recommendations(WARDROBE, mood="happy")

        assert exc_info.value.status_code == 503
        assert exc_info.value.code == "AI_SERVICE_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_provider_error(self) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(
                request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
            )
        )
        stylist = AIStylist(None, client=client)

        with pytest.raises(ApiError) as exc_info:
            await stylist.analyze_user_style(WARDROBE)

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "AI_SERVICE_ERROR"

    @pytest.mark.parametrize("content", [None, "", "not json", '{"outfit": "none"}'])
    @pytest.mark.asyncio
    async def test_invalid_response(self, content: str | None) -> None:
        stylist = AIStylist(None, client=stub_client(content))

        with pytest.raises(ApiError) as exc_info:
            await stylist.get_occasion_outfit("party (casual)", WARDROBE)

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "AI_INVALID_RESPONSE"


class TestRequests:
    """Test request helper schemas."""

    def test_recommendation_criteria(self) -> None:
        assert not RecommendationRequest().has_criteria
        assert RecommendationRequest(weather="rainy").has_criteria

    def test_occasion_description_defaults_to_casual(self) -> None:
        assert OccasionRequest(occasion="brunch").describe() == "brunch (casual)"
