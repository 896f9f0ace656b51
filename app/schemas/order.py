"""Pydantic схемы для валидации заказов (Orders)"""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import MAX_ADDRESS_LENGTH, MAX_NOTES_LENGTH, MAX_PAYMENT_METHOD_LENGTH, Config
from app.utils.helpers import ensure_aware, get_now


class OrderItemCreateSchema(BaseModel):
    """Позиция в запросе на создание заказа: ссылка на блюдо или меню"""

    model_config = ConfigDict(str_strip_whitespace=True)

    item_type: Literal["meal", "menu"] = Field(..., description="Тип позиции")
    item_id: int = Field(..., gt=0, description="ID блюда или меню")
    quantity: int = Field(1, ge=1, le=Config.MAX_ITEM_QUANTITY, description="Количество")
    notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH, description="Комментарий")


class OrderCreateSchema(BaseModel):
    """Схема для создания заказа с полной валидацией"""

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    delivery_address: str = Field(
        ..., min_length=1, max_length=MAX_ADDRESS_LENGTH, description="Адрес доставки"
    )
    delivery_date: datetime = Field(..., description="Дата и время доставки")
    delivery_notes: str | None = Field(
        None, max_length=MAX_NOTES_LENGTH, description="Комментарий к доставке"
    )
    payment_method: str | None = Field(
        None, max_length=MAX_PAYMENT_METHOD_LENGTH, description="Способ оплаты (как есть)"
    )
    items: list[OrderItemCreateSchema] = Field(
        ..., min_length=1, max_length=Config.MAX_ITEMS_PER_ORDER, description="Позиции заказа"
    )

    @field_validator("delivery_date")
    @classmethod
    def validate_delivery_date(cls, v: datetime) -> datetime:
        """Дата доставки должна быть в будущем (проверяется только при создании)"""
        v = ensure_aware(v)
        if v <= get_now():
            raise ValueError("Delivery date must be in the future")
        return v

    @field_validator("delivery_notes", "payment_method")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class OrderStatusUpdateSchema(BaseModel):
    """Схема запроса на смену статуса"""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: str = Field(..., min_length=1, max_length=20, description="Целевой статус")

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        return v.lower()
