"""Tests for the LedgerService public API."""

import uuid
from datetime import timedelta
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from visitman import LedgerService
from visitman.exceptions import InvalidPhoneFormat, StoreUnavailable, UnknownCustomer, VisitmanError
from visitman.models import CheckIn, Customer
from visitman.signals import reward_unlocked


pytestmark = pytest.mark.django_db


def check_in_times(business, phone, times):
    result = None
    for _ in range(times):
        result = LedgerService.check_in(business.pk, phone)
    return result


class TestCheckIn:
    def test_first_visit_creates_customer(self, business):
        result = LedgerService.check_in(business.pk, "555-123-4567", staff_user_id="staff-1")

        assert result.created is True
        assert result.customer.phone == "(555) 123-4567"
        assert result.aggregate.visits == 1
        assert result.aggregate.reward_tiers_unlocked == ()
        assert result.rewards_earned == ()
        assert Customer.objects.count() == 1
        assert CheckIn.objects.get().staff_user_id == "staff-1"

    def test_unpacks_as_customer_and_aggregate(self, business):
        customer, agg = LedgerService.check_in(business.pk, "5551234567")
        assert customer.pk == agg.customer_id

    def test_return_visit_reuses_customer(self, business):
        first = LedgerService.check_in(business.pk, "555-123-4567")
        second = LedgerService.check_in(business.pk, "(555) 123 4567")
        assert second.created is False
        assert second.customer.pk == first.customer.pk
        assert second.aggregate.visits == 2

    def test_full_reward_scenario(self, business):
        result = check_in_times(business, "555-123-4567", 1)
        assert result.aggregate.visits == 1
        assert result.aggregate.reward_tiers_unlocked == ()

        result = check_in_times(business, "555-123-4567", 4)
        assert result.aggregate.visits == 5
        assert [t.description for t in result.aggregate.reward_tiers_unlocked] == [
            "10% Off Next Service"
        ]
        assert [t.threshold_visits for t in result.rewards_earned] == [5]
        assert result.aggregate.progress == 0.0

        result = check_in_times(business, "555-123-4567", 5)
        assert result.aggregate.visits == 10
        assert [t.description for t in result.aggregate.reward_tiers_unlocked] == [
            "10% Off Next Service",
            "Free Basic Service",
        ]
        assert [t.threshold_visits for t in result.rewards_earned] == [10]
        assert result.aggregate.progress == 1.0
        assert result.aggregate.next_tier is None
        assert Customer.objects.count() == 1

    def test_rewards_earned_only_on_threshold_visit(self, business):
        check_in_times(business, "555-123-4567", 5)
        result = LedgerService.check_in(business.pk, "555-123-4567")
        assert result.rewards_earned == ()

    def test_reward_unlocked_signal(self, business, capture_signal):
        calls = capture_signal(reward_unlocked)
        check_in_times(business, "555-123-4567", 5)
        assert len(calls) == 1
        assert calls[0]["visits"] == 5
        assert calls[0]["tier"].threshold_visits == 5

    def test_business_reward_rule(self, business):
        business.reward_rule = [
            {"threshold_visits": 2, "description": "Free wash", "kind": "free_item", "value": "Wash"},
        ]
        business.save()

        result = check_in_times(business, "555-123-4567", 2)
        assert [t.description for t in result.rewards_earned] == ["Free wash"]
        assert result.aggregate.progress == 1.0

    def test_invalid_phone(self, business):
        with pytest.raises(InvalidPhoneFormat):
            LedgerService.check_in(business.pk, "12345")
        assert Customer.objects.count() == 0
        assert CheckIn.objects.count() == 0

    @pytest.mark.parametrize("business_id", [uuid.uuid4(), "nope"])
    def test_unknown_business(self, db, business_id):
        with pytest.raises(VisitmanError) as exc_info:
            LedgerService.check_in(business_id, "555-123-4567")
        assert exc_info.value.code == "BUSINESS_NOT_FOUND"
        assert exc_info.value.data["business_id"] == str(business_id)

    def test_failed_record_rolls_back_new_customer(self, business):
        with patch("visitman.service.record_visit", side_effect=StoreUnavailable(operation="x")):
            with pytest.raises(StoreUnavailable):
                LedgerService.check_in(business.pk, "555-123-4567")
        assert Customer.objects.count() == 0


class TestListCustomerAggregates:
    def test_pairs_in_customer_order(self, business):
        LedgerService.check_in(business.pk, "555-000-0001")
        LedgerService.check_in(business.pk, "555-000-0002")
        LedgerService.check_in(business.pk, "555-000-0002")

        pairs = LedgerService.list_customer_aggregates(business.pk)

        assert [c.phone for c, _ in pairs] == ["(555) 000-0001", "(555) 000-0002"]
        assert [a.visits for _, a in pairs] == [1, 2]
        assert all(c.pk == a.customer_id for c, a in pairs)

    def test_customer_without_checkins(self, customer):
        ((cust, agg),) = LedgerService.list_customer_aggregates(customer.business_id)
        assert agg.visits == 0
        assert agg.last_visit == cust.created_at

    def test_last_visit_is_latest(self, customer, add_checkins):
        created = add_checkins(customer, 3)
        CheckIn.objects.create(
            customer=customer, checkin_time=timezone.now() - timedelta(days=30)
        )
        ((_, agg),) = LedgerService.list_customer_aggregates(customer.business_id)
        assert agg.visits == 4
        assert agg.last_visit == created[-1].checkin_time

    def test_isolated_per_business(self, business, other_business):
        LedgerService.check_in(business.pk, "555-123-4567")
        LedgerService.check_in(other_business.pk, "555-123-4567")
        LedgerService.check_in(other_business.pk, "555-123-4567")

        ((_, agg),) = LedgerService.list_customer_aggregates(business.pk)
        assert agg.visits == 1

    def test_constant_query_count(self, business, add_checkins, django_assert_num_queries):
        for n in range(1, 6):
            cust = Customer.objects.create(business=business, phone=f"555-000-000{n}")
            add_checkins(cust, n)

        # business + customers + check-ins
        with django_assert_num_queries(3):
            pairs = LedgerService.list_customer_aggregates(business.pk)
        assert [a.visits for _, a in pairs] == [1, 2, 3, 4, 5]

    def test_empty_business(self, business):
        assert LedgerService.list_customer_aggregates(business.pk) == []


class TestConvenience:
    @pytest.fixture
    def populated(self, business):
        check_in_times(business, "555-000-0001", 2)
        check_in_times(business, "555-000-0002", 7)
        check_in_times(business, "555-000-0003", 11)
        check_in_times(business, "555-000-0004", 1)
        return business

    def test_customer_aggregate(self, business):
        result = check_in_times(business, "555-123-4567", 3)
        agg = LedgerService.customer_aggregate(result.customer.pk)
        assert agg.visits == 3
        assert agg.progress == pytest.approx(0.6)

    def test_customer_aggregate_unknown(self, db):
        with pytest.raises(UnknownCustomer):
            LedgerService.customer_aggregate(uuid.uuid4())

    def test_summary(self, populated):
        summary = LedgerService.summary(populated.pk)
        assert summary.total_visits == 21
        assert summary.unique_customers == 4
        assert summary.customers_with_rewards == 2

    def test_most_loyal(self, populated):
        top = LedgerService.most_loyal(populated.pk, limit=2)
        assert [a.visits for _, a in top] == [11, 7]

    def test_most_loyal_default_size(self, populated, settings):
        settings.VISITMAN = {"LEADERBOARD_SIZE": 3}
        assert len(LedgerService.most_loyal(populated.pk)) == 3

    def test_recent(self, populated):
        regular = Customer.objects.get(business=populated, phone="(555) 000-0001")
        CheckIn.objects.create(customer=regular, checkin_time=timezone.now() + timedelta(minutes=5))

        ((cust, agg),) = LedgerService.recent(populated.pk, limit=1)
        assert cust == regular
        assert agg.visits == 3

    def test_search(self, populated):
        assert [c.phone for c, _ in LedgerService.search(populated.pk, "0003")] == [
            "(555) 000-0003"
        ]
        assert len(LedgerService.search(populated.pk, "555")) == 4
        assert len(LedgerService.search(populated.pk, "")) == 4


class TestCommands:
    def test_checkin_command(self, business):
        out = StringIO()
        call_command("visitman_checkin", str(business.pk), "555-123-4567", "--staff", "s1", stdout=out)
        assert "New customer (555) 123-4567: 1 visits." in out.getvalue()
        assert CheckIn.objects.get().staff_user_id == "s1"

    def test_checkin_command_reports_reward(self, business):
        check_in_times(business, "555-123-4567", 4)
        out = StringIO()
        call_command("visitman_checkin", str(business.pk), "555-123-4567", stdout=out)
        assert "Reward earned: 10% Off Next Service" in out.getvalue()

    def test_checkin_command_invalid_phone(self, business):
        with pytest.raises(CommandError, match="INVALID_PHONE_FORMAT"):
            call_command("visitman_checkin", str(business.pk), "123")

    def test_report_command(self, business):
        check_in_times(business, "555-123-4567", 5)
        check_in_times(business, "555-000-0001", 1)
        out = StringIO()
        call_command("visitman_report", str(business.pk), stdout=out)
        output = out.getvalue()
        assert "(555) 123-4567  visits=5" in output
        assert "rewards=10% Off Next Service" in output
        assert "2 customers, 6 visits, 1 with rewards." in output

    def test_report_command_top(self, business):
        check_in_times(business, "555-123-4567", 3)
        check_in_times(business, "555-000-0001", 1)
        out = StringIO()
        call_command("visitman_report", str(business.pk), "--top", "1", stdout=out)
        output = out.getvalue()
        assert "(555) 123-4567  visits=3" in output
        assert "(555) 000-0001" not in output
        # Totals cover the whole business, not just the rows shown
        assert "2 customers, 4 visits, 0 with rewards." in output
        assert "1 customers" not in output

    def test_report_unknown_business(self, db):
        with pytest.raises(CommandError, match="BUSINESS_NOT_FOUND"):
            call_command("visitman_report", str(uuid.uuid4()))
