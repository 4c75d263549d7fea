"""Enumerations shared across the domain model."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    PRODUCT = "product"
    INPUT = "input"
    PROCESS = "process"
    PRODUCT_INPUT = "product_input"
    PRODUCT_PROCESS = "product_process"
    PRODUCT_DISCOUNT_RANGE = "product_discount_range"
    CLIENT = "client"
    PRODUCT_DISCOUNT_CLIENT = "product_discount_client"
