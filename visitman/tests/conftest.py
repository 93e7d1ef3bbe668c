"""Pytest fixtures for Visitman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from visitman.models import Business, CheckIn, Customer
from visitman.services.rewards import RewardPolicy, RewardTier


@pytest.fixture
def business(db):
    """Create a salon."""
    return Business.objects.create(name="Studio Bella", email="owner@bella.test")


@pytest.fixture
def other_business(db):
    """Create a second, unrelated salon."""
    return Business.objects.create(name="Cut & Co", email="hello@cutco.test")


@pytest.fixture
def customer(business):
    """Create a customer with no visits."""
    return Customer.objects.create(business=business, phone="555-123-4567")


@pytest.fixture
def policy():
    """Canonical two-tier reward program."""
    return RewardPolicy(
        [
            RewardTier(5, "10% Off Next Service", "discount", "10%"),
            RewardTier(10, "Free Basic Service", "free_item", "Basic Cut"),
        ]
    )


@pytest.fixture
def add_checkins():
    """Factory: add N check-ins to a customer, one hour apart, ending now."""

    def _add(customer, count, staff_user_id=""):
        now = timezone.now()
        return [
            CheckIn.objects.create(
                customer=customer,
                staff_user_id=staff_user_id,
                checkin_time=now - timedelta(hours=count - i),
            )
            for i in range(1, count + 1)
        ]

    return _add


@pytest.fixture
def capture_signal():
    """Connect a recording receiver to a signal for the duration of a test."""
    connected = []

    def _capture(signal):
        calls = []

        def receiver(sender, **kwargs):
            calls.append({"sender": sender, **kwargs})

        signal.connect(receiver, weak=False)
        connected.append((signal, receiver))
        return calls

    yield _capture

    for signal, receiver in connected:
        signal.disconnect(receiver)
