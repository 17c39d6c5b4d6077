"""Authentication port.

Token issuing and verification belong to the auth collaborator. Ordering
trusts the ``Principal`` it gets back and never reads a customer id from the
request body.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    id: str
    is_active: bool = True
    is_admin: bool = False


class AuthenticationError(Exception):
    """The bearer token is missing, unknown or belongs to a disabled account."""


class IdentityProvider(ABC):
    @abstractmethod
    def authenticate(self, token: str) -> Principal:
        """Resolve a bearer token, raising AuthenticationError when it is not valid."""
        ...
