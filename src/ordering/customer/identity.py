"""Customer identity upsert: command, handler and the shared helper."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.customer.contact import is_valid_email, normalize_email
from ordering.customer.customer import Customer
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


def upsert_customer_identity(email, name=None, phone=None) -> str:
    """Return the customer id for ``email``, creating a guest identity when needed.

    Idempotent: the normalized email is the key, so a repeat checkout from
    the same address reuses the stored customer.
    """
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise ValidationError({"email": ["Please enter a valid email address"]})

    repo = current_domain.repository_for(Customer)
    customer = repo.find_by_email(normalized)
    if customer is None:
        customer = Customer.register_guest(normalized, name=name, phone=phone)
        logger.info("Guest customer created", customer_id=str(customer.id))
    else:
        customer.refresh_contact(name=name, phone=phone)

    repo.add(customer)
    return str(customer.id)


@ordering.command(part_of="Customer")
class UpsertCustomerIdentity:
    email = String(required=True, max_length=254)
    name = String(max_length=100)
    phone = String(max_length=20)


@ordering.command_handler(part_of=Customer)
class UpsertCustomerIdentityHandler:
    @handle(UpsertCustomerIdentity)
    def upsert(self, command):
        return upsert_customer_identity(command.email, name=command.name, phone=command.phone)
