"""Tests for the transaction loader and matrix helpers."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from basketrec.recommender.utils import (
    load_transactions,
    transactions_from_frame,
    transactions_to_matrix,
)


@pytest.fixture
def groceries_csv(tmp_path: Path) -> Path:
    """Write a small purchase CSV in the Groceries dataset layout."""
    csv_path = tmp_path / "groceries.csv"
    csv_path.write_text(
        "Member_number,Date,itemDescription\n"
        "1808,21-07-2015,tropical fruit\n"
        "2552,05-01-2015,whole milk\n"
        "1808,01-05-2015,  rolls/buns  \n"
        "0042,19-09-2015,pip fruit\n"
        "2552,10-03-2015,\n"
        "2552,10-03-2015,whole milk\n"
        " ,10-03-2015,soda\n"
    )
    return csv_path


def test_load_transactions_groups_by_customer(groceries_csv: Path) -> None:
    """Test that items are grouped per customer in file order."""
    transactions = load_transactions(str(groceries_csv))

    assert transactions == {
        "1808": ["tropical fruit", "rolls/buns"],
        "2552": ["whole milk", "whole milk"],
        "0042": ["pip fruit"],
    }


def test_load_transactions_keeps_customer_order(groceries_csv: Path) -> None:
    """Test that customers appear in order of their first record."""
    transactions = load_transactions(str(groceries_csv))

    assert list(transactions) == ["1808", "2552", "0042"]


def test_load_transactions_keeps_ids_as_strings(groceries_csv: Path) -> None:
    """Test that numeric-looking customer IDs are not reinterpreted."""
    transactions = load_transactions(str(groceries_csv))

    assert "0042" in transactions
    assert "42" not in transactions


def test_load_transactions_missing_file(tmp_path: Path) -> None:
    """Test that a missing CSV raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_transactions(str(tmp_path / "nonexistent.csv"))


def test_load_transactions_missing_columns(tmp_path: Path) -> None:
    """Test that a CSV without the required columns raises ValueError."""
    bad_csv = tmp_path / "bad.csv"
    bad_csv.write_text("id,name\n1,test\n")

    with pytest.raises(ValueError, match="missing required columns"):
        load_transactions(str(bad_csv))


def test_load_transactions_skips_lines_with_extra_fields(tmp_path: Path) -> None:
    """Test that a line with too many fields is dropped, not the whole file."""
    csv_path = tmp_path / "groceries.csv"
    csv_path.write_text(
        "Member_number,Date,itemDescription\n"
        "1000,01-01-2015,whole milk\n"
        "1000,01-01-2015,soda,extra,fields\n"
        "1000,02-01-2015,rolls/buns\n"
    )

    transactions = load_transactions(str(csv_path))

    assert transactions == {"1000": ["whole milk", "rolls/buns"]}


def test_load_transactions_header_only(tmp_path: Path) -> None:
    """Test that a header-only CSV yields no transactions."""
    empty_csv = tmp_path / "empty.csv"
    empty_csv.write_text("Member_number,Date,itemDescription\n")

    assert load_transactions(str(empty_csv)) == {}


def test_load_transactions_custom_columns(tmp_path: Path) -> None:
    """Test loading with non-default column names."""
    csv_path = tmp_path / "orders.csv"
    csv_path.write_text("user,product\nu1,tea\nu1,biscuits\n")

    transactions = load_transactions(
        str(csv_path), customer_col="user", item_col="product"
    )

    assert transactions == {"u1": ["tea", "biscuits"]}


def test_transactions_from_frame_skips_missing_values() -> None:
    """Test that rows with missing customer or item are dropped."""
    df = pd.DataFrame(
        {
            "Member_number": ["1", None, "2", "3"],
            "itemDescription": ["soda", "beef", None, " curd "],
        }
    )

    assert transactions_from_frame(df) == {"1": ["soda"], "3": ["curd"]}


def test_transactions_to_matrix_counts_repeats() -> None:
    """Test that repeat purchases are summed into the matrix cell."""
    matrix, item_to_idx = transactions_to_matrix(
        {"C1": ["milk", "bread", "milk"], "C2": ["eggs"]}
    )

    assert item_to_idx == {"bread": 0, "eggs": 1, "milk": 2}
    assert matrix.shape == (2, 3)
    assert matrix.dtype == np.int64
    assert matrix.toarray().tolist() == [[1, 0, 2], [0, 1, 0]]

