from checkout.api.routes import maintenance_router, order_router, reservation_router

__all__ = ["order_router", "reservation_router", "maintenance_router"]
