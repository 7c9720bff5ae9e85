"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from checkout.domain import checkout
from checkout.order.order import Order


@checkout.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number):
        orders = self._dao.query.filter(order_number=order_number).all().items
        return orders[0] if orders else None

    def get_by_order_number(self, order_number):
        order = self.find_by_order_number(order_number)
        if order is None:
            raise ObjectNotFoundError(f"Order {order_number} does not exist")
        return order
