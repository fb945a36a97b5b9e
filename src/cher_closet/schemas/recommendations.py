"""AI recommendation request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.base import BaseModelConfig


class RecommendationRequest(BaseModelConfig):
    """Criteria for outfit recommendations; at least one is required."""

    mood: str | None = Field(default=None, max_length=100)
    weather: str | None = Field(default=None, max_length=100)
    occasion: str | None = Field(default=None, max_length=100)

    @property
    def has_criteria(self) -> bool:
        return any((self.mood, self.weather, self.occasion))


class OccasionRequest(BaseModelConfig):
    """Request for an outfit suited to one occasion."""

    occasion: str = Field(..., min_length=1, max_length=100)
    formality: str | None = Field(default=None, max_length=50)
    additional_info: str | None = Field(default=None, max_length=500)

    def describe(self) -> str:
        """Occasion text sent to the model, e.g. ``"wedding (formal) - outdoors"``."""
        text = f"{self.occasion} ({self.formality or 'casual'})"
        if self.additional_info:
            text += f" - {self.additional_info}"
        return text


class AIResponseModel(BaseModel):
    """Base for payloads parsed from model output; unknown keys are dropped."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class OutfitSuggestion(AIResponseModel):
    name: str
    item_ids: list[int] = Field(default_factory=list)
    reasoning: str = ""
    occasion: str | None = None
    mood: str | None = None


class OutfitRecommendations(AIResponseModel):
    recommendations: list[OutfitSuggestion] = Field(default_factory=list)


class OccasionOutfit(AIResponseModel):
    outfit: OutfitSuggestion
    tips: list[str] = Field(default_factory=list)


class StyleProfile(AIResponseModel):
    """Summary of a user's style derived from their wardrobe."""

    dominant_styles: list[str] = Field(default_factory=list)
    color_palette: list[str] = Field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = Field(default_factory=list)


class StyleAnalysisResponse(BaseModelConfig):
    analysis: StyleProfile
    item_count: int = Field(..., ge=0)
