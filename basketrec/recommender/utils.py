"""Utility functions for the recommendation system.

This module provides the transaction loader that turns raw purchase records
into per-customer item lists, and the helper that converts those lists into
a sparse customer-item count matrix for pair counting.
"""

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.sparse import csr_matrix

# Configure module logger
logger = logging.getLogger(__name__)

# Column names used by the Groceries dataset
DEFAULT_CUSTOMER_COL = "Member_number"
DEFAULT_ITEM_COL = "itemDescription"

# Counter type for frequencies and co-occurrence counts
COUNT_DTYPE = np.int64


def transactions_from_frame(
    df: pd.DataFrame,
    customer_col: str = DEFAULT_CUSTOMER_COL,
    item_col: str = DEFAULT_ITEM_COL,
) -> Dict[str, List[str]]:
    """Group purchase records into per-customer item lists.

    Customer identifiers and item names are trimmed. Records where either
    value is missing or blank are skipped. Items keep the order in which they
    appear in the frame, and customers keep the order of their first record.

    Args:
        df: DataFrame with one purchase record per row.
        customer_col: Name of the column containing customer identifiers.
        item_col: Name of the column containing item names.

    Returns:
        Dictionary mapping customer ID to the ordered list of purchased items.
        Repeat purchases of the same item are kept.

    Raises:
        ValueError: If the frame is missing required columns.
    """
    required_columns = {customer_col, item_col}
    if not required_columns.issubset(df.columns):
        missing = required_columns - set(df.columns)
        raise ValueError(f"CSV missing required columns: {missing}")

    customers = df[customer_col].astype("string").str.strip()
    items = df[item_col].astype("string").str.strip()

    valid = customers.notna() & items.notna() & (customers != "") & (items != "")
    num_skipped = int((~valid).sum())
    if num_skipped:
        logger.warning(
            "Skipped invalid purchase records",
            extra={"num_skipped": num_skipped},
        )

    transactions: Dict[str, List[str]] = {}
    for customer, item in zip(customers[valid], items[valid]):
        transactions.setdefault(str(customer), []).append(str(item))

    return transactions


def load_transactions(
    csv_path: str,
    customer_col: str = DEFAULT_CUSTOMER_COL,
    item_col: str = DEFAULT_ITEM_COL,
) -> Dict[str, List[str]]:
    """Load a purchase CSV and group it into per-customer item lists.

    Every column is read as a string so that identifiers such as ``"0042"``
    are not reinterpreted as numbers. Lines with more fields than the header
    are skipped one at a time instead of failing the whole load.

    Args:
        csv_path: Path to CSV file with a header row.
        customer_col: Name of the column containing customer identifiers.
        item_col: Name of the column containing item names.

    Returns:
        Dictionary mapping customer ID to the ordered list of purchased items.
        A header-only CSV yields an empty dictionary.

    Raises:
        FileNotFoundError: If CSV file does not exist.
        ValueError: If CSV is missing required columns.

    Example:
        >>> transactions = load_transactions("data/groceries.csv")
        >>> print(f"Number of customers: {len(transactions)}")
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info(f"Loading CSV from {csv_path}")
    bad_lines: List[List[str]] = []
    df = pd.read_csv(
        csv_path,
        dtype=str,
        keep_default_na=False,
        engine="python",
        on_bad_lines=lambda line: bad_lines.append(line),
    )

    if bad_lines:
        logger.warning(
            "Skipped malformed CSV lines",
            extra={"num_skipped": len(bad_lines)},
        )

    logger.info(f"Loaded {len(df)} purchase records")

    transactions = transactions_from_frame(df, customer_col, item_col)

    logger.info(f"Unique customers: {len(transactions)}")

    return transactions


def transactions_to_matrix(
    transactions: Mapping[str, Sequence[str]],
) -> Tuple[csr_matrix, Dict[str, int]]:
    """Convert per-customer item lists to a sparse customer-item count matrix.

    Rows are customers, columns are items, and each cell holds how many times
    the customer bought the item. Duplicate entries are summed when the
    matrix is built, so repeat purchases are counted.

    Args:
        transactions: Mapping from customer ID to ordered item list.

    Returns:
        A tuple containing:
            - Sparse CSR matrix of shape (n_customers, n_items) with counts
            - Dictionary mapping item name to matrix column index, in sorted
              item order
    """
    unique_items = sorted({item for items in transactions.values() for item in items})
    item_to_idx = {item: idx for idx, item in enumerate(unique_items)}

    row_indices: List[int] = []
    col_indices: List[int] = []
    for row, items in enumerate(transactions.values()):
        for item in items:
            row_indices.append(row)
            col_indices.append(item_to_idx[item])

    data = np.ones(len(row_indices), dtype=COUNT_DTYPE)
    rows = np.asarray(row_indices, dtype=np.int64)
    cols = np.asarray(col_indices, dtype=np.int64)

    customer_item_matrix = csr_matrix(
        (data, (rows, cols)),
        shape=(len(transactions), len(unique_items)),
        dtype=COUNT_DTYPE,
    )

    logger.debug(
        "Built customer-item matrix",
        extra={
            "num_customers": customer_item_matrix.shape[0],
            "num_items": customer_item_matrix.shape[1],
            "non_zero_entries": customer_item_matrix.nnz,
        },
    )

    return customer_item_matrix, item_to_idx
