"""BasketRec: co-purchase product recommendation system.

This package builds item-to-item affinity scores from customer purchase
histories and serves "people who bought X also bought Y" recommendations.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Transaction loading, model construction and ranking logic
"""

__version__ = "0.1.0"
