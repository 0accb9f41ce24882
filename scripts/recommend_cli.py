"""CLI script for getting "people who bought X also bought" recommendations.

Builds the affinity model from a purchase CSV, then either answers a single
``--product`` query or prompts for product names until the user types
``exit``.

Example:
    Interactive session:
        $ python scripts/recommend_cli.py data/groceries.csv

    One-shot query with scores:
        $ python scripts/recommend_cli.py data/groceries.csv \\
            --product "whole milk" --top-n 3 --show-scores
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from basketrec.recommender.infer import DEFAULT_TOP_N, recommend_with_scores
from basketrec.recommender.model import AffinityModel
from basketrec.recommender.train import train_affinity_model
from basketrec.recommender.utils import DEFAULT_CUSTOMER_COL, DEFAULT_ITEM_COL

PROMPT = "Enter a product name (or 'exit' to quit): "
EXIT_COMMAND = "exit"

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise, only warnings
            are shown so log lines do not mix with the prompt.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace object containing parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Recommend products frequently bought together.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/recommend_cli.py data/groceries.csv
  python scripts/recommend_cli.py data/groceries.csv --product "whole milk"
  python scripts/recommend_cli.py data/groceries.csv --product soda --top-n 10 --show-scores
        """,
    )

    parser.add_argument(
        "csv_path",
        type=str,
        help="Path to purchase CSV (default columns: Member_number, Date, itemDescription)",
    )
    parser.add_argument(
        "--product",
        type=str,
        default=None,
        help="Answer a single query and exit instead of prompting",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of recommendations to show (default: {DEFAULT_TOP_N})",
    )
    parser.add_argument(
        "--show-scores",
        action="store_true",
        help="Print the affinity score next to each recommendation",
    )
    parser.add_argument(
        "--customer-col",
        type=str,
        default=DEFAULT_CUSTOMER_COL,
        help=f"Customer ID column (default: {DEFAULT_CUSTOMER_COL})",
    )
    parser.add_argument(
        "--item-col",
        type=str,
        default=DEFAULT_ITEM_COL,
        help=f"Item name column (default: {DEFAULT_ITEM_COL})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args(argv)


def format_recommendations(
    model: AffinityModel,
    product: str,
    top_n: int = DEFAULT_TOP_N,
    show_scores: bool = False,
) -> List[str]:
    """Render the answer to one product query as output lines."""
    ranked = recommend_with_scores(model, product, top_n)

    if not ranked:
        return [f"Sorry, no recommendations found for '{product}'."]

    lines = [f"People who bought '{product}' also bought:"]
    for rank, (related_item, score) in enumerate(ranked, start=1):
        if show_scores:
            lines.append(f"{rank}. {related_item} ({score:.3f})")
        else:
            lines.append(f"{rank}. {related_item}")
    return lines


def run_interactive(
    model: AffinityModel,
    top_n: int = DEFAULT_TOP_N,
    show_scores: bool = False,
    input_func: Callable[[str], str] = input,
    output: Optional[TextIO] = None,
) -> None:
    """Prompt for product names until the user types 'exit' or input ends.

    Args:
        model: Affinity model to query.
        top_n: Number of recommendations per query.
        show_scores: Print the affinity score next to each recommendation.
        input_func: Function used to read a line; takes the prompt.
        output: Stream the answers are written to. Defaults to stdout.
    """
    if output is None:
        output = sys.stdout

    print("Welcome to the product recommendation system!", file=output)

    while True:
        try:
            product = input_func(PROMPT).strip()
        except EOFError:
            print(file=output)
            break

        if product.lower() == EXIT_COMMAND:
            break

        for line in format_recommendations(model, product, top_n, show_scores):
            print(line, file=output)

    print("Thank you for using the recommendation system!", file=output)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the recommendation CLI.

    Returns:
        Exit code: 0 on success, 1 on error, 130 when interrupted.
    """
    args = parse_arguments(argv)
    setup_logging(verbose=args.verbose)

    try:
        model = train_affinity_model(
            args.csv_path,
            customer_col=args.customer_col,
            item_col=args.item_col,
        )

        if args.product is not None:
            for line in format_recommendations(
                model, args.product.strip(), args.top_n, args.show_scores
            ):
                print(line)
        else:
            run_interactive(model, top_n=args.top_n, show_scores=args.show_scores)

        return 0

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
