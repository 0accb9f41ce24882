"""Module for getting recommendations.

Ranks the products bought together with a queried product using a built
affinity model.
"""

import logging
import time
from typing import Dict, Iterable, List, Tuple

from basketrec.recommender.model import AffinityModel

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_TOP_N = 5


def _rank_key(entry: Tuple[str, float]) -> Tuple[float, str]:
    # Highest score first, then item name ascending
    related_item, score = entry
    return (-score, related_item)


def recommend_with_scores(
    model: AffinityModel,
    product: str,
    top_n: int = DEFAULT_TOP_N,
) -> List[Tuple[str, float]]:
    """Get the top related products for a product, with their scores.

    Products are ranked by affinity score, highest first. Equal scores are
    ordered by related product name so results never depend on dictionary
    order. The lookup is exact: no case folding or trimming is applied.

    Args:
        model: Affinity model to query.
        product: Product name as it appears in the purchase data.
        top_n: Maximum number of related products to return.

    Returns:
        List of (product, score) tuples, most related first. Empty if the
        product is unknown or top_n is not positive.
    """
    if top_n <= 0 or product not in model:
        return []

    ranked = sorted(model.neighbours(product).items(), key=_rank_key)
    return ranked[:top_n]


def recommend_products(
    model: AffinityModel,
    product: str,
    top_n: int = DEFAULT_TOP_N,
) -> List[str]:
    """Get the names of the top related products for a product.

    Args:
        model: Affinity model to query.
        product: Product name as it appears in the purchase data.
        top_n: Maximum number of related products to return.

    Returns:
        List of product names, most related first. An empty list means there
        are no known co-purchases for the product.

    Example:
        >>> model = build_affinity_model({
        ...     "C1": ["milk", "bread"],
        ...     "C2": ["milk", "bread"],
        ...     "C3": ["milk", "eggs"],
        ... })
        >>> recommend_products(model, "milk", top_n=5)
        ['bread', 'eggs']
    """
    start_time = time.time()

    recommendations = [
        related_item
        for related_item, _ in recommend_with_scores(model, product, top_n)
    ]

    if not recommendations:
        logger.info(
            "No recommendations found",
            extra={"product": product, "top_n": top_n},
        )
    else:
        logger.debug(
            "Recommendations generated",
            extra={
                "product": product,
                "num_recommendations": len(recommendations),
                "total_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )

    return recommendations


def batch_recommend(
    model: AffinityModel,
    products: Iterable[str],
    top_n: int = DEFAULT_TOP_N,
) -> Dict[str, List[str]]:
    """Generate recommendations for several products against one model.

    Args:
        model: Affinity model to query.
        products: Product names to look up.
        top_n: Number of recommendations per product.

    Returns:
        Dictionary mapping each queried product to its recommendation list.
    """
    results = {product: recommend_products(model, product, top_n) for product in products}

    logger.info(f"Batch recommendations completed for {len(results)} products")

    return results
