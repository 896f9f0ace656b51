"""Service layer: бизнес-операции над заказами"""

from app.services.order_service import OrderService
from app.services.service_factory import ServiceFactory


__all__ = ["OrderService", "ServiceFactory"]
