"""AI stylist endpoints.

Every route needs a session and a minimum number of wardrobe items before
the model is consulted.
"""

from beartype import beartype
from fastapi import APIRouter, Depends

from ...core.errors import ApiError
from ...schemas.auth import AuthenticatedIdentity
from ...schemas.recommendations import (
    OccasionOutfit,
    OccasionRequest,
    OutfitRecommendations,
    RecommendationRequest,
    StyleAnalysisResponse,
    StyleProfile,
)
from ...services.ai_service import AIStylist
from ...services.storage import Storage
from ..dependencies import get_ai_stylist, get_storage, require_authenticated
from ..error_handling import ErrorFunnelRoute

router = APIRouter(
    route_class=ErrorFunnelRoute, dependencies=[Depends(require_authenticated)]
)

STYLE_PROFILE_MIN_ITEMS = 5
STYLE_ANALYSIS_MIN_ITEMS = 3


@router.post("/outfit-recommendations")
@beartype
async def outfit_recommendations(
    payload: RecommendationRequest,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
    stylist: AIStylist = Depends(get_ai_stylist),
) -> OutfitRecommendations:
    if not payload.has_criteria:
        raise ApiError.bad_request(
            "At least one criteria (mood, weather, or occasion) is required "
            "for recommendations"
        )
    items = await storage.get_wardrobe_items(identity.id)
    if not items:
        raise ApiError.bad_request(
            "Your wardrobe is empty. Add some items to get recommendations."
        )
    return await stylist.get_outfit_recommendations(
        items, weather=payload.weather, occasion=payload.occasion, mood=payload.mood
    )


@router.post("/occasion-outfit")
@beartype
async def occasion_outfit(
    payload: OccasionRequest,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
    stylist: AIStylist = Depends(get_ai_stylist),
) -> OccasionOutfit:
    items = await storage.get_wardrobe_items(identity.id)
    if not items:
        raise ApiError.bad_request(
            "Your wardrobe is empty. Add some items to get an outfit suggestion."
        )
    return await stylist.get_occasion_outfit(payload.describe(), items)


@router.get("/style-profile")
@beartype
async def style_profile(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
    stylist: AIStylist = Depends(get_ai_stylist),
) -> StyleProfile:
    items = await storage.get_wardrobe_items(identity.id)
    if len(items) < STYLE_PROFILE_MIN_ITEMS:
        raise ApiError.bad_request(
            f"Add at least {STYLE_PROFILE_MIN_ITEMS} items to your wardrobe to "
            "generate a style profile.",
            details={"itemCount": len(items)},
        )
    outfits = await storage.get_outfits(identity.id)
    return await stylist.analyze_user_style(items, outfits)


@router.get("/style-analysis")
@beartype
async def style_analysis(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
    stylist: AIStylist = Depends(get_ai_stylist),
) -> StyleAnalysisResponse:
    items = await storage.get_wardrobe_items(identity.id)
    if len(items) < STYLE_ANALYSIS_MIN_ITEMS:
        raise ApiError.bad_request(
            f"Add at least {STYLE_ANALYSIS_MIN_ITEMS} items to your wardrobe to "
            "generate a style analysis.",
            details={"itemCount": len(items)},
        )
    analysis = await stylist.analyze_user_style(items)
    return StyleAnalysisResponse(analysis=analysis, item_count=len(items))
