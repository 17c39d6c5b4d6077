"""Tests for contact detail validation."""

import pytest
from ordering.customer.contact import contact_errors, is_valid_email, is_valid_phone, normalize_phone


class TestPhone:
    @pytest.mark.parametrize("phone", ["9876543210", "6000000000", "98765 43210", "+919876543210"])
    def test_valid(self, phone):
        assert is_valid_phone(phone)

    @pytest.mark.parametrize("phone", ["5876543210", "987654321", "98765432101", "abcdefghij", "", None])
    def test_invalid(self, phone):
        assert not is_valid_phone(phone)

    def test_normalize_strips_separators(self):
        assert normalize_phone("98765-43210") == "9876543210"


class TestEmail:
    @pytest.mark.parametrize("email", ["asha@example.com", "ASHA@Example.COM", "a.b+c@mail.co.in"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email",
        ["", "asha", "asha@", "@example.com", "asha@example", "as ha@example.com", "a@@b.com", "asha@-example.com"],
    )
    def test_invalid(self, email):
        assert not is_valid_email(email)


def test_contact_errors_collects_every_field():
    errors = contact_errors("", "123", "nope")
    assert set(errors) == {"name", "phone", "email"}


def test_contact_errors_empty_when_valid():
    assert contact_errors("Asha", "9876543210", "asha@example.com") == {}
