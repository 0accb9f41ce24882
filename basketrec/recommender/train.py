"""Co-purchase affinity model construction.

This module builds the item-to-item affinity model from per-customer purchase
histories. Every pair of positions in a customer's item list that holds two
different items counts as one co-occurrence of those items, and the raw
counts are normalized against item popularity:

    score(A, B) = co(A, B) / max(freq(A) + freq(B) - co(A, B), co(A, B))

Pairs are counted per index pair, not per unique item pair. A customer who
bought item A ``a`` times and item B ``b`` times adds ``a * b`` to co(A, B),
which is exactly the off-diagonal cell of ``X.T @ X`` for the customer-item
count matrix ``X``.
"""

import logging
from typing import Dict, Mapping, Sequence

import numpy as np

from basketrec.recommender.model import AffinityModel, ItemCounts
from basketrec.recommender.utils import (
    DEFAULT_CUSTOMER_COL,
    DEFAULT_ITEM_COL,
    load_transactions,
    transactions_to_matrix,
)

# Configure module logger
logger = logging.getLogger(__name__)


def count_item_pairs(transactions: Mapping[str, Sequence[str]]) -> ItemCounts:
    """Count item frequencies and pairwise co-occurrences.

    Args:
        transactions: Mapping from customer ID to ordered item list.

    Returns:
        ItemCounts with the frequency table and the symmetric co-occurrence
        table. Items that never co-occurred with a different item have no
        entry in the co-occurrence table.
    """
    if not any(transactions.values()):
        logger.info("No purchases to count")
        return ItemCounts()

    customer_item_matrix, item_to_idx = transactions_to_matrix(transactions)

    item_frequency = np.asarray(customer_item_matrix.sum(axis=0)).ravel()

    # Cell (a, b) sums count_a * count_b over customers
    cooccurrence = (customer_item_matrix.T @ customer_item_matrix).tocsr()
    cooccurrence.setdiag(0)
    cooccurrence.eliminate_zeros()
    cooccurrence.sort_indices()

    idx_to_item = list(item_to_idx)

    frequency = {item: int(item_frequency[idx]) for item, idx in item_to_idx.items()}

    co_counts: Dict[str, Dict[str, int]] = {}
    for row, item in enumerate(idx_to_item):
        start, end = cooccurrence.indptr[row], cooccurrence.indptr[row + 1]
        if start == end:
            continue
        co_counts[item] = {
            idx_to_item[col]: int(count)
            for col, count in zip(
                cooccurrence.indices[start:end], cooccurrence.data[start:end]
            )
        }

    logger.info(
        "Counted item pairs",
        extra={
            "num_customers": len(transactions),
            "num_items": len(frequency),
            "num_cooccurring_items": len(co_counts),
            "total_occurrences": int(item_frequency.sum()),
        },
    )

    return ItemCounts(frequency=frequency, co_counts=co_counts)


def _affinity(co_count: int, freq_a: int, freq_b: int) -> float:
    # Repeat purchases can push co(A, B) to freq(A) + freq(B) or beyond, so the
    # denominator is floored at co(A, B); those pairs score 1.0
    denominator = max(freq_a + freq_b - co_count, co_count)
    return co_count / denominator


def compute_affinity_scores(counts: ItemCounts) -> AffinityModel:
    """Normalize raw co-occurrence counts into affinity scores.

    For customers without repeat purchases, freq(A) >= co(A, B) and the
    plain overlap formula applies. Because every index pair is counted,
    a customer with repeats adds ``a * b`` to co(A, B), which can exceed
    freq(A) + freq(B) - co(A, B). The denominator is therefore never
    smaller than co(A, B), which keeps every score in (0, 1].

    Args:
        counts: Frequency and co-occurrence tables from count_item_pairs().

    Returns:
        AffinityModel with a score in (0, 1] for every co-occurring pair.
    """
    frequency = counts.frequency

    scores = {
        item: {
            other: _affinity(co_count, frequency[item], frequency[other])
            for other, co_count in related.items()
        }
        for item, related in counts.co_counts.items()
    }

    return AffinityModel(scores)


def build_affinity_model(transactions: Mapping[str, Sequence[str]]) -> AffinityModel:
    """Build the affinity model from per-customer purchase histories.

    Args:
        transactions: Mapping from customer ID to ordered item list.

    Returns:
        Immutable AffinityModel. Empty when there are no transactions.

    Example:
        >>> model = build_affinity_model({
        ...     "C1": ["milk", "bread"],
        ...     "C2": ["milk", "bread"],
        ...     "C3": ["milk", "eggs"],
        ... })
        >>> round(model.score("milk", "bread"), 3)
        0.667
    """
    model = compute_affinity_scores(count_item_pairs(transactions))

    logger.info(
        "Affinity model built",
        extra={"num_products": len(model), "num_pairs": model.num_pairs},
    )

    return model


def train_affinity_model(
    csv_path: str,
    customer_col: str = DEFAULT_CUSTOMER_COL,
    item_col: str = DEFAULT_ITEM_COL,
) -> AffinityModel:
    """Load purchase data from CSV and build the affinity model.

    This is the main entry point used by the CLI and the API at startup.

    Args:
        csv_path: Path to CSV file with one purchase record per row.
        customer_col: Name of the column containing customer identifiers.
        item_col: Name of the column containing item names.

    Returns:
        Immutable AffinityModel.

    Raises:
        FileNotFoundError: If CSV file does not exist.
        ValueError: If CSV is missing required columns.
    """
    logger.info("=" * 60)
    logger.info("Building co-purchase affinity model")
    logger.info("=" * 60)

    try:
        transactions = load_transactions(
            csv_path,
            customer_col=customer_col,
            item_col=item_col,
        )

        model = build_affinity_model(transactions)

        logger.info("=" * 60)
        logger.info(
            f"Model ready: {len(model)} products, {model.num_pairs} related pairs"
        )
        logger.info("=" * 60)

        return model

    except Exception as e:
        logger.error(f"Model construction failed: {e}", exc_info=True)
        raise
