"""FastAPI routes for the Storefront domain — cart pricing."""

from fastapi import APIRouter

from storefront.api.schemas import (
    CartQuoteRequest,
    CartQuoteResponse,
    QuotedLineSchema,
    ShippingInfoSchema,
)
from storefront.cart.cart import ShoppingCart

cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("/quote", response_model=CartQuoteResponse)
async def quote_cart(body: CartQuoteRequest) -> CartQuoteResponse:
    """Price a client-held cart.

    Lines go through the same normalisation as the client cart, so duplicate
    products merge and quantities are clamped to stock before pricing.
    """
    cart = ShoppingCart.from_snapshot({"items": [line.model_dump() for line in body.items]})

    return CartQuoteResponse(
        items=[
            QuotedLineSchema(
                product_id=str(item.product_id),
                name=item.name or "",
                price=item.price,
                quantity=item.quantity,
                stock=item.stock,
                product_type=item.product_type,
                line_total=item.line_total,
            )
            for item in cart.items
        ],
        total_items=cart.total_items,
        subtotal=cart.total_price,
        customs_fee=cart.customs_fee,
        shipping=ShippingInfoSchema(**cart.shipping_info.to_dict()),
        total=cart.grand_total,
        box_count=cart.box_count,
        is_box_order_valid=cart.is_box_order_valid,
        box_units_needed=cart.box_units_needed,
    )
