"""FastAPI routes for the Ordering domain: orders, payments, coupons and admin."""

import json
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from ordering.api.dependencies import admin_principal, current_principal
from ordering.api.schemas import (
    BulkUpdateOrdersRequest,
    BulkUpdateResponse,
    CancelOrderRequest,
    ConfirmCashOnDeliveryRequest,
    CouponValidationResponse,
    CreateGatewayOrderRequest,
    GatewayKeyResponse,
    GatewayOrderResponse,
    OrderListResponse,
    OrderResponse,
    PlaceGuestOrderRequest,
    PlaceOrderRequest,
    UpdateOrderRequest,
    ValidateCouponRequest,
    VerifyPaymentRequest,
)
from ordering.auth.port import Principal
from ordering.coupon.validation import validate_coupon
from ordering.order.cancellation import CancelOrder
from ordering.order.cash_on_delivery import ConfirmCashOnDelivery
from ordering.order.gateway_checkout import CreateGatewayOrder, gateway_public_key
from ordering.order.placement import PlaceGuestOrder, PlaceOrder
from ordering.order.queries import get_customer_order, list_customer_orders, search_orders
from ordering.order.repository import OrderFilters
from ordering.order.status import BulkUpdateOrders, UpdateOrderStatus
from ordering.order.verification import VerifyPayment


def _placement_kwargs(body) -> dict:
    return {
        "customer_type": body.customer_type,
        "hostel": body.hostel,
        "contact_info": json.dumps(body.contact_info.model_dump()),
        "payment_method": body.payment_method,
        "coupon_code": body.coupon_code,
        "delivery_date": body.delivery_date,
        "delivery_slot": body.delivery_slot,
        "notes": body.notes,
    }


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, principal: Principal = Depends(current_principal)) -> OrderResponse:
    command = PlaceOrder(
        customer_id=principal.id,
        items=json.dumps([item.model_dump() for item in body.items]),
        delivery_address=json.dumps(body.delivery_address.model_dump()),
        **_placement_kwargs(body),
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order placed successfully", order=result)


@order_router.post("/guest", status_code=201, response_model=OrderResponse)
async def place_guest_order(body: PlaceGuestOrderRequest) -> OrderResponse:
    command = PlaceGuestOrder(
        items=json.dumps([item.model_dump() for item in body.items]),
        address=body.address,
        **_placement_kwargs(body),
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order placed successfully", order=result)


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(principal: Principal = Depends(current_principal)) -> OrderListResponse:
    orders = [order.snapshot() for order in list_customer_orders(principal.id)]
    return OrderListResponse(orders=orders, total=len(orders))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    return OrderResponse(order=get_customer_order(order_id, principal.id).snapshot())


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(
    order_id: str,
    body: CancelOrderRequest,
    principal: Principal = Depends(current_principal),
) -> OrderResponse:
    command = CancelOrder(order_id=order_id, customer_id=principal.id, reason=body.reason)
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order cancelled successfully", order=result)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/cod/confirm", response_model=OrderResponse)
async def confirm_cash_on_delivery(
    body: ConfirmCashOnDeliveryRequest,
    principal: Principal = Depends(current_principal),
) -> OrderResponse:
    command = ConfirmCashOnDelivery(order_id=body.order_id, customer_id=principal.id)
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="COD order confirmed successfully", order=result)


@payment_router.post("/gateway-orders", status_code=201, response_model=GatewayOrderResponse)
async def create_gateway_order(body: CreateGatewayOrderRequest) -> GatewayOrderResponse:
    command = CreateGatewayOrder(order_id=body.order_id, amount=body.amount)
    result = current_domain.process(command, asynchronous=False)
    return GatewayOrderResponse(**result)


@payment_router.post("/verify", response_model=OrderResponse)
async def verify_payment(body: VerifyPaymentRequest) -> OrderResponse:
    command = VerifyPayment(
        order_id=body.order_id,
        gateway_order_id=body.gateway_order_id,
        payment_id=body.payment_id,
        signature=body.signature,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Payment verified successfully", order=result)


@payment_router.get("/key", response_model=GatewayKeyResponse)
async def get_gateway_key() -> GatewayKeyResponse:
    return GatewayKeyResponse(key_id=gateway_public_key())


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.post("/validate", response_model=CouponValidationResponse)
async def check_coupon(body: ValidateCouponRequest):
    evaluation = validate_coupon(body.code, body.order_amount)
    response = CouponValidationResponse(
        success=evaluation.valid,
        valid=evaluation.valid,
        code=evaluation.code,
        discount_amount=evaluation.discount_amount,
        description=evaluation.description,
        message="Coupon applied successfully" if evaluation.valid else evaluation.reason,
    )
    if not evaluation.valid:
        return JSONResponse(status_code=400, content=response.model_dump())
    return response


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"], dependencies=[Depends(admin_principal)])


@admin_router.get("", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    customer_type: str | None = None,
    payment_method: str | None = None,
    payment_status: str | None = None,
    search: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> OrderListResponse:
    filters = OrderFilters(
        status=status,
        customer_type=customer_type,
        payment_method=payment_method,
        payment_status=payment_status,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )
    result = search_orders(filters, page=page, limit=limit)
    return OrderListResponse(
        orders=[order.snapshot() for order in result.orders],
        total=result.total,
        page=result.page,
        pages=result.pages,
    )


@admin_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
        cancellation_reason=body.cancellation_reason,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order updated successfully", order=result)


@admin_router.post("/bulk", response_model=BulkUpdateResponse)
async def bulk_update_orders(body: BulkUpdateOrdersRequest) -> BulkUpdateResponse:
    command = BulkUpdateOrders(
        order_ids=json.dumps(body.order_ids),
        status=body.status,
        notes=body.notes,
        cancellation_reason=body.cancellation_reason,
    )
    result = current_domain.process(command, asynchronous=False)
    return BulkUpdateResponse(**result)
