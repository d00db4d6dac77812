"""Tests for period cost aggregation."""
import pytest
from sqlalchemy.dialects import postgresql

from subscription_service.application.period_cost import PeriodCostUseCase, build_period_cost_query
from subscription_service.application.subscriptions import CreateSubscriptionUseCase
from subscription_service.domain.errors import InvalidInput
from subscription_service.domain.month import parse_month


@pytest.fixture
def three_subs(db_session, user_id):
    create = CreateSubscriptionUseCase(db_session)
    create.execute(user_id=user_id, service_name="Netflix", price=100, start_date="01-2025")
    create.execute(user_id=user_id, service_name="Spotify", price=200, start_date="03-2025")
    create.execute(user_id=user_id, service_name="YouTube", price=300, start_date="06-2025")


def _cost(db, user_id, start, end, names=()):
    return PeriodCostUseCase(db).execute(
        user_id=user_id, start_date=start, end_date=end, service_names=names,
    )


class TestPeriodCost:
    def test_sum_without_filter(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025") == 600

    def test_filter_single_service(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", ["Spotify"]) == 200

    def test_filter_several_services(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", ["Netflix", "YouTube"]) == 400

    def test_filter_duplicates_collapsed(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", ["Netflix", "Netflix"]) == 100

    def test_filter_single_name_as_string(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", "Netflix") == 100

    def test_filter_is_case_sensitive(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", ["netflix"]) == 0

    def test_empty_filter_means_no_filter(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "12-2025", []) == 600
        assert _cost(db_session, user_id, "01-2025", "12-2025", None) == 600

    def test_range_excluding_all_is_zero(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2026", "12-2026") == 0

    def test_no_subscriptions_is_zero(self, db_session, user_id):
        assert _cost(db_session, user_id, "01-2025", "12-2025") == 0

    def test_bounds_inclusive(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "01-2025", "01-2025") == 100
        assert _cost(db_session, user_id, "03-2025", "06-2025") == 500
        assert _cost(db_session, user_id, "02-2025", "05-2025") == 200

    def test_reversed_range_is_zero(self, db_session, user_id, three_subs):
        assert _cost(db_session, user_id, "12-2025", "01-2025") == 0

    def test_other_user_not_counted(self, db_session, user_id, other_user_id, three_subs):
        CreateSubscriptionUseCase(db_session).execute(
            user_id=other_user_id, service_name="Netflix", price=1000, start_date="02-2025",
        )
        assert _cost(db_session, user_id, "01-2025", "12-2025") == 600
        assert _cost(db_session, other_user_id, "01-2025", "12-2025") == 1000

    @pytest.mark.parametrize("start, end", [
        ("2025-01", "12-2025"),
        ("01-2025", "13-2025"),
        ("1-2025", "12-2025"),
        ("", "12-2025"),
    ])
    def test_invalid_bounds(self, db_session, user_id, start, end):
        with pytest.raises(InvalidInput):
            _cost(db_session, user_id, start, end)

    def test_returns_int(self, db_session, user_id, three_subs):
        assert isinstance(_cost(db_session, user_id, "01-2025", "12-2025"), int)


class TestBuildPeriodCostQuery:
    def _sql(self, query):
        return str(query.compile(dialect=postgresql.dialect()))

    def test_no_service_clause_without_filter(self, user_id):
        q = build_period_cost_query(user_id, parse_month("01-2025"), parse_month("12-2025"))
        sql = self._sql(q)
        assert "sum(subscription.price)" in sql
        assert "BETWEEN" in sql
        assert "service_name" not in sql

    def test_service_clause_appended_with_filter(self, user_id):
        q = build_period_cost_query(
            user_id, parse_month("01-2025"), parse_month("12-2025"), ["Netflix"],
        )
        sql = self._sql(q)
        assert "subscription.service_name IN" in sql

    def test_values_are_bound_not_inlined(self, user_id):
        hostile = "x'; DROP TABLE subscription; --"
        q = build_period_cost_query(
            user_id, parse_month("01-2025"), parse_month("12-2025"), [hostile],
        )
        compiled = q.compile(dialect=postgresql.dialect())
        assert hostile not in str(compiled)
        assert hostile in compiled.params.values() or [hostile] in compiled.params.values()
