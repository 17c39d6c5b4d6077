"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer): separate from
internal Protean commands.
"""

from datetime import date

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    state: str
    pincode: str
    landmark: str | None = None


class ContactSchema(BaseModel):
    name: str
    phone: str
    email: str


class OrderLineSchema(BaseModel):
    product_id: str
    quantity: int


class GuestLineSchema(BaseModel):
    name: str
    quantity: int
    price: float | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[OrderLineSchema]
    customer_type: str
    hostel: str | None = None
    delivery_address: AddressSchema
    contact_info: ContactSchema
    payment_method: str
    coupon_code: str | None = None
    delivery_date: date | None = None
    delivery_slot: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "milk-500ml", "quantity": 2}],
                    "customer_type": "outsider",
                    "delivery_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                    },
                    "contact_info": {"name": "Asha", "phone": "9876543210", "email": "asha@example.com"},
                    "payment_method": "cod",
                }
            ]
        }
    }


class PlaceGuestOrderRequest(BaseModel):
    items: list[GuestLineSchema]
    customer_type: str
    hostel: str | None = None
    address: str
    contact_info: ContactSchema
    payment_method: str
    coupon_code: str | None = None
    delivery_date: date | None = None
    delivery_slot: str | None = None
    notes: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderRequest(BaseModel):
    status: str | None = None
    notes: str | None = None
    cancellation_reason: str | None = None


class BulkUpdateOrdersRequest(UpdateOrderRequest):
    order_ids: list[str] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Payment Request Schemas
# ---------------------------------------------------------------------------
class ConfirmCashOnDeliveryRequest(BaseModel):
    order_id: str


class CreateGatewayOrderRequest(BaseModel):
    order_id: str
    amount: float | None = None


class VerifyPaymentRequest(BaseModel):
    order_id: str
    gateway_order_id: str
    payment_id: str
    signature: str


class ValidateCouponRequest(BaseModel):
    code: str
    order_amount: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    success: bool = True
    message: str | None = None
    order: dict


class OrderListResponse(BaseModel):
    success: bool = True
    orders: list[dict]
    total: int
    page: int = 1
    pages: int = 1


class GatewayOrderResponse(BaseModel):
    success: bool = True
    order_id: str
    gateway_order_id: str
    amount: float
    amount_minor: int
    currency: str
    key_id: str


class GatewayKeyResponse(BaseModel):
    success: bool = True
    key_id: str


class CouponValidationResponse(BaseModel):
    success: bool
    valid: bool
    code: str
    discount_amount: float = 0.0
    description: str | None = None
    message: str | None = None


class BulkUpdateResponse(BaseModel):
    success: bool = True
    matched_count: int
    modified_count: int
    failures: list[dict] = Field(default_factory=list)
