"""Recommendation module for BasketRec.

This module contains the transaction loader, the co-purchase affinity model
builder, and the ranking functions used to answer "people who bought X also
bought" queries.
"""
