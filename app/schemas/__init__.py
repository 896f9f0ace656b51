"""Pydantic schemas package"""
from app.schemas.order import (
    OrderCreateSchema,
    OrderItemCreateSchema,
    OrderStatusUpdateSchema,
)


__all__ = [
    "OrderCreateSchema",
    "OrderItemCreateSchema",
    "OrderStatusUpdateSchema",
]
