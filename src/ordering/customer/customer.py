"""Customer aggregate: the identity an order is placed under.

Registered customers arrive through the auth collaborator; guests are created
on their first checkout and reused for later orders from the same email.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from ordering.customer.contact import is_valid_email, normalize_email
from ordering.domain import ordering


@ordering.event(part_of="Customer")
class GuestCustomerRegistered:
    """A first-time guest checkout created a customer identity."""

    __version__ = "v1"

    customer_id = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@ordering.aggregate
class Customer:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=100)
    phone = String(max_length=20)
    is_guest = Boolean(default=False)
    registered_at = DateTime()

    @invariant.post
    def email_must_be_normalized(self):
        if self.email != normalize_email(self.email) or not is_valid_email(self.email):
            raise ValidationError({"email": ["Please enter a valid email address"]})

    @classmethod
    def register_guest(cls, email, name=None, phone=None):
        customer = cls(
            email=normalize_email(email),
            name=name,
            phone=phone,
            is_guest=True,
            registered_at=datetime.now(UTC),
        )
        customer.raise_(
            GuestCustomerRegistered(
                customer_id=str(customer.id),
                email=customer.email,
                registered_at=customer.registered_at,
            )
        )
        return customer

    def refresh_contact(self, name=None, phone=None):
        """Fill in contact details that were missing on the stored identity."""
        if name and not self.name:
            self.name = name
        if phone and not self.phone:
            self.phone = phone


@ordering.repository(part_of=Customer)
class CustomerRepository:
    def find_by_email(self, email: str) -> Customer | None:
        return self._dao.query.filter(email=normalize_email(email)).all().first
