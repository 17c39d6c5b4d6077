"""Order placement: authenticated and guest checkout commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Identifier, String, Text

from ordering.customer.contact import contact_errors
from ordering.customer.identity import upsert_customer_identity
from ordering.domain import ordering
from ordering.order.builder import (
    CheckoutRequest,
    place_order,
    placement_result,
    placement_unit_of_work,
    resolve_guest_lines,
    resolve_product_lines,
)
from ordering.order.order import Order

_REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "pincode")


def _load(value, field: str):
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise ValidationError({field: ["Malformed JSON"]}) from None


def _load_object(value, field: str) -> dict:
    loaded = _load(value, field) or {}
    if not isinstance(loaded, dict):
        raise ValidationError({field: ["Must be an object"]})
    return loaded


@ordering.command(part_of="Order")
class PlaceOrder:
    """Checkout by a signed-in customer. ``customer_id`` comes from the auth collaborator."""

    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, quantity}]
    customer_type = String(required=True, max_length=20)
    hostel = String(max_length=100)
    delivery_address = Text(required=True)  # JSON: {street, city, state, pincode, landmark}
    contact_info = Text(required=True)  # JSON: {name, phone, email}
    payment_method = String(required=True, max_length=20)
    coupon_code = String(max_length=50)
    delivery_date = Date()
    delivery_slot = String(max_length=20)
    notes = Text()


@ordering.command(part_of="Order")
class PlaceGuestOrder:
    """Checkout without an account; the customer identity is created from the email."""

    items = Text(required=True)  # JSON: [{name, quantity, price?}]
    customer_type = String(required=True, max_length=20)
    hostel = String(max_length=100)
    address = Text(required=True)  # free text
    contact_info = Text(required=True)  # JSON: {name, phone, email}
    payment_method = String(required=True, max_length=20)
    coupon_code = String(max_length=50)
    delivery_date = Date()
    delivery_slot = String(max_length=20)
    notes = Text()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        address = _load_object(command.delivery_address, "delivery_address")
        missing = [name for name in _REQUIRED_ADDRESS_FIELDS if not str(address.get(name) or "").strip()]
        if missing:
            raise ValidationError({"delivery_address": [f"Missing address fields: {', '.join(missing)}"]})

        request = CheckoutRequest(
            customer_id=str(command.customer_id),
            lines=resolve_product_lines(_load(command.items, "items")),
            customer_type=command.customer_type,
            hostel=command.hostel,
            delivery_address={
                "street": address["street"],
                "city": address["city"],
                "state": address["state"],
                "pincode": str(address["pincode"]),
                "landmark": address.get("landmark"),
            },
            contact_info=_load_object(command.contact_info, "contact_info"),
            payment_method=command.payment_method,
            coupon_code=command.coupon_code,
            delivery_date=command.delivery_date,
            delivery_slot=command.delivery_slot,
            notes=command.notes,
        )
        with placement_unit_of_work():
            order = place_order(request)
        return placement_result(order)

    @handle(PlaceGuestOrder)
    def place_guest_order(self, command):
        contact = _load_object(command.contact_info, "contact_info")
        errors = contact_errors(contact.get("name"), contact.get("phone"), contact.get("email"))
        if errors:
            raise ValidationError(errors)

        lines = resolve_guest_lines(_load(command.items, "items"))

        with placement_unit_of_work():
            customer_id = upsert_customer_identity(
                contact.get("email"),
                name=contact.get("name"),
                phone=contact.get("phone"),
            )
            order = place_order(
                CheckoutRequest(
                    customer_id=customer_id,
                    lines=lines,
                    customer_type=command.customer_type,
                    hostel=command.hostel,
                    delivery_address={"street": (command.address or "").strip()},
                    contact_info=contact,
                    payment_method=command.payment_method,
                    coupon_code=command.coupon_code,
                    delivery_date=command.delivery_date,
                    delivery_slot=command.delivery_slot,
                    notes=command.notes,
                    channel="guest",
                )
            )
        return placement_result(order)
