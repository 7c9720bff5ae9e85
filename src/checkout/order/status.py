"""Fulfilment status progression — command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.order.order import Order, OrderStatus


@checkout.command(part_of="Order")
class UpdateOrderStatus:
    order_number = String(required=True, max_length=50)
    status = String(required=True, choices=OrderStatus)


@checkout.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_order_number(command.order_number)
        order.update_status(command.status)
        repo.add(order)
