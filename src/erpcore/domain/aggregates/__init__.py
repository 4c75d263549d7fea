"""Aggregate use cases built on the reconciliation engine."""

from __future__ import annotations

from .client import PRODUCT_DISCOUNTS, ClientOrchestrator
from .dto import Aggregate, AggregateCreate, AggregateUpdate
from .orchestrator import AggregateOrchestrator
from .product import (
    PRODUCT_DISCOUNT_RANGES,
    PRODUCT_INPUTS,
    PRODUCT_PROCESSES,
    ProductOrchestrator,
)

__all__ = [
    "PRODUCT_DISCOUNTS",
    "PRODUCT_DISCOUNT_RANGES",
    "PRODUCT_INPUTS",
    "PRODUCT_PROCESSES",
    "Aggregate",
    "AggregateCreate",
    "AggregateOrchestrator",
    "AggregateUpdate",
    "ClientOrchestrator",
    "ProductOrchestrator",
]
