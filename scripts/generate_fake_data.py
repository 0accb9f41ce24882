"""Generate fake grocery purchase data for testing and development.

This module creates synthetic purchase records in the layout of the
Groceries dataset (``Member_number,Date,itemDescription``) so the
recommendation system can be exercised without the real data.

Items are drawn from a handful of shopping themes, which gives the data
co-purchase structure worth recommending from.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_purchases
        df = generate_fake_purchases(num_customers=100, num_visits=500)
"""

import argparse
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_CUSTOMERS = 200
DEFAULT_NUM_VISITS = 1000
DEFAULT_DAYS_BACK = 365
DEFAULT_SEED = 42
FIRST_MEMBER_NUMBER = 1000
DATE_FORMAT = "%d-%m-%Y"

# Items that tend to end up in the same basket
SHOPPING_THEMES = [
    ["whole milk", "rolls/buns", "butter", "yogurt", "domestic eggs"],
    ["other vegetables", "root vegetables", "tropical fruit", "citrus fruit"],
    ["sausage", "frankfurter", "pork", "beef", "mustard"],
    ["soda", "bottled water", "bottled beer", "canned beer", "shopping bags"],
    ["coffee", "sugar", "pastry", "brown bread", "whipped/sour cream"],
]


def generate_fake_purchases(
    num_customers: int = DEFAULT_NUM_CUSTOMERS,
    num_visits: int = DEFAULT_NUM_VISITS,
    end_date: Optional[datetime] = None,
    seed: int = DEFAULT_SEED,
) -> pd.DataFrame:
    """Generate synthetic grocery purchase records.

    Each visit picks a customer and a shopping theme, then buys two to four
    items, mostly from that theme and occasionally from anywhere.

    Args:
        num_customers: Number of unique customers to simulate. Must be positive.
        num_visits: Number of store visits to simulate. Must be positive.
        end_date: Latest visit date. Defaults to today.
        seed: Random seed for reproducibility.

    Returns:
        A pandas DataFrame with the columns Member_number, Date and
        itemDescription, one row per purchased item, sorted by visit date.

    Raises:
        ValueError: If num_customers or num_visits is not positive.
    """
    if num_customers <= 0 or num_visits <= 0:
        raise ValueError("num_customers and num_visits must be positive")

    rng = random.Random(seed)
    end_date = end_date or datetime.now()
    all_items = [item for theme in SHOPPING_THEMES for item in theme]

    records = []
    for _ in range(num_visits):
        member_number = FIRST_MEMBER_NUMBER + rng.randrange(num_customers)
        visit_date = end_date - timedelta(days=rng.randrange(DEFAULT_DAYS_BACK))
        theme = rng.choice(SHOPPING_THEMES)

        for _ in range(rng.randint(2, 4)):
            pool = theme if rng.random() < 0.8 else all_items
            records.append({
                "Member_number": member_number,
                "Date": visit_date,
                "itemDescription": rng.choice(pool),
            })

    df = pd.DataFrame(records)
    df = df.sort_values("Date", kind="stable").reset_index(drop=True)
    df["Date"] = df["Date"].dt.strftime(DATE_FORMAT)

    return df


def main() -> None:
    """Generate fake purchase data and save it as CSV."""
    parser = argparse.ArgumentParser(
        description="Generate a fake grocery purchase CSV."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=str(Path(__file__).parent.parent / "data" / "groceries.csv"),
        help="Output CSV path (default: data/groceries.csv)",
    )
    parser.add_argument("--num-customers", type=int, default=DEFAULT_NUM_CUSTOMERS)
    parser.add_argument("--num-visits", type=int, default=DEFAULT_NUM_VISITS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    args = parser.parse_args()

    print(f"Generating {args.num_visits} fake visits...")

    try:
        df = generate_fake_purchases(
            num_customers=args.num_customers,
            num_visits=args.num_visits,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {output_path}")
    print(f"\nData summary:")
    print(f"  Total purchases: {len(df)}")
    print(f"  Unique customers: {df['Member_number'].nunique()}")
    print(f"  Unique items: {df['itemDescription'].nunique()}")


if __name__ == "__main__":
    main()
