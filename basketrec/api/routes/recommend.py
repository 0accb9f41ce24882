"""Recommendation endpoints for the BasketRec API.

This module provides the "people who bought X also bought" endpoint. The
affinity model is built once at application startup and stored on
``app.state``; handlers receive it through the ``get_model`` dependency.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from basketrec.api.exceptions import ModelLoadError, ModelNotFoundError
from basketrec.recommender.infer import DEFAULT_TOP_N, recommend_with_scores
from basketrec.recommender.model import AffinityModel

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/recommend",
    tags=["recommendations"],
)


class RecommendationResponse(BaseModel):
    """Response model for recommendation requests.

    Attributes:
        product: The product the recommendations were generated for.
        recommendations: Related product names, most related first.
        scores: Affinity score of each recommended product, same order.
    """

    product: str = Field(..., description="Queried product name")
    recommendations: List[str] = Field(
        default_factory=list, description="Related products, most related first"
    )
    scores: List[float] = Field(
        default_factory=list, description="Affinity score per recommendation"
    )


def get_model(request: Request) -> AffinityModel:
    """Get the affinity model built at startup.

    Raises:
        ModelLoadError: If building the model failed.
        ModelNotFoundError: If no purchase data was available.
    """
    state = request.app.state

    if state.load_error is not None:
        raise ModelLoadError(state.data_path, state.load_error)

    if state.model is None:
        raise ModelNotFoundError(state.data_path)

    return state.model


@router.get("/{product:path}", response_model=RecommendationResponse)
def get_recommendations(
    product: str,
    top_n: int = Query(DEFAULT_TOP_N, ge=0, description="Maximum recommendations"),
    model: AffinityModel = Depends(get_model),
) -> RecommendationResponse:
    """Get products frequently bought together with a product.

    An unknown product is not an error: the response carries an empty
    recommendation list.

    Example:
        GET /recommend/whole milk?top_n=3
        Returns the 3 products most often bought with "whole milk".
    """
    logger.info(
        "Generating recommendations",
        extra={"product": product, "top_n": top_n},
    )

    ranked = recommend_with_scores(model, product, top_n)

    if not ranked:
        logger.info("No recommendations found", extra={"product": product})

    return RecommendationResponse(
        product=product,
        recommendations=[related_item for related_item, _ in ranked],
        scores=[score for _, score in ranked],
    )
