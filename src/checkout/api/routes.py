"""FastAPI routes for the Checkout domain — orders, stock holds and the expiry sweep."""

import json

import structlog
from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from checkout.api.auth import TriggerAuthorization, TriggerSecrets, authorize
from checkout.api.schemas import (
    CancelOrderRequest,
    HoldStockRequest,
    OrderItemResponse,
    OrderNumberResponse,
    OrderResponse,
    PlaceOrderRequest,
    ReservationIdResponse,
    StatusResponse,
    SweepResponse,
    UpdateOrderStatusRequest,
)
from checkout.order.cancellation import CancelOrder
from checkout.order.order import Order
from checkout.order.payment import ConfirmPayment
from checkout.order.placement import PlaceOrder
from checkout.order.status import UpdateOrderStatus
from checkout.reservation.holding import HoldStock
from checkout.reservation.sweep import SweepExpiredReservations
from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderNumberResponse)
async def place_order(body: PlaceOrderRequest) -> OrderNumberResponse:
    fields = {
        "email": body.email,
        "items": json.dumps([item.model_dump() for item in body.items]),
    }
    if body.hold_minutes:
        fields["hold_minutes"] = body.hold_minutes
    result = current_domain.process(PlaceOrder(**fields), asynchronous=False)
    return OrderNumberResponse(order_number=result)


@order_router.get("/{order_number}", response_model=OrderResponse)
async def get_order(order_number: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get_by_order_number(order_number)
    return OrderResponse(
        order_number=order.order_number,
        email=order.email,
        status=order.status,
        payment_status=order.payment_status,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name or "",
                image=item.image,
                price=item.price,
                quantity=item.quantity,
                product_type=item.product_type,
                line_total=item.line_total,
            )
            for item in order.items
        ],
        subtotal=order.subtotal,
        shipping=order.shipping,
        customs_fee=order.customs_fee,
        total=order.total,
        currency=order.currency,
        reservation_expires_at=order.reservation_expires_at,
        notes=order.notes,
    )


@order_router.put("/{order_number}/payment", response_model=StatusResponse)
async def confirm_payment(order_number: str) -> StatusResponse:
    current_domain.process(ConfirmPayment(order_number=order_number), asynchronous=False)
    return StatusResponse(status="paid")


@order_router.put("/{order_number}/cancel", response_model=StatusResponse)
async def cancel_order(order_number: str, body: CancelOrderRequest) -> StatusResponse:
    command = CancelOrder(order_number=order_number, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")


@order_router.put("/{order_number}/status", response_model=StatusResponse)
async def update_order_status(order_number: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(order_number=order_number, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reservation Router
# ---------------------------------------------------------------------------
reservation_router = APIRouter(prefix="/reservations", tags=["reservations"])


@reservation_router.post("", status_code=201, response_model=ReservationIdResponse)
async def hold_stock(body: HoldStockRequest) -> ReservationIdResponse:
    fields = body.model_dump(exclude_none=True)
    result = current_domain.process(HoldStock(**fields), asynchronous=False)
    return ReservationIdResponse(reservation_id=result)


# ---------------------------------------------------------------------------
# Maintenance Router (scheduled and manual sweep triggers)
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/cron", tags=["maintenance"])


def _run_sweep(trigger: str, authorization: str | None, expected_secret: str | None) -> JSONResponse:
    outcome = authorize(authorization, expected_secret)
    if outcome == TriggerAuthorization.UNAUTHORIZED:
        logger.warning("Rejected reservation cleanup trigger", trigger=trigger)
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    if outcome == TriggerAuthorization.OPEN:
        logger.warning("No trigger secret configured, running cleanup unauthenticated", trigger=trigger)

    add_context(trigger=trigger)
    try:
        result = current_domain.process(SweepExpiredReservations(), asynchronous=False)
    except Exception:
        logger.exception("Reservation cleanup failed")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    finally:
        clear_context()

    body = SweepResponse(**result)
    return JSONResponse(content=body.model_dump(mode="json", by_alias=True))


@maintenance_router.get("/cleanup-reservations")
async def scheduled_cleanup(authorization: str | None = Header(default=None)) -> JSONResponse:
    """Release expired stock holds. Called by the scheduler with ``CRON_SECRET``."""
    secrets = TriggerSecrets.from_env()
    return _run_sweep("scheduled", authorization, secrets.scheduled_secret)


@maintenance_router.post("/cleanup-reservations")
async def manual_cleanup(authorization: str | None = Header(default=None)) -> JSONResponse:
    """Release expired stock holds on demand, with ``ADMIN_API_KEY`` (or ``CRON_SECRET``)."""
    secrets = TriggerSecrets.from_env()
    return _run_sweep("manual", authorization, secrets.manual_secret)
