"""FastAPI application module for BasketRec.

This module contains the FastAPI application, route handlers, and API
endpoints for querying co-purchase recommendations over HTTP.
"""
