import logging
from datetime import date, datetime, timedelta

from siddha_savor.utils.diet_plans import DIET_PLANS, get_day_plan, meal_items_for, plan_day_for
from siddha_savor.utils.timing import OperationTimer
from siddha_savor.utils.tokens import (
    STATUS_ACTIVE,
    STATUS_EXPIRED,
    generate_reset_code,
    generate_token,
    hours_remaining,
    mask_token,
    status_of,
)

NOW = datetime(2026, 3, 10, 12, 0, 0)


def test_status_is_active_only_before_expiry():
    assert status_of(NOW + timedelta(seconds=1), NOW) == STATUS_ACTIVE
    assert status_of(NOW, NOW) == STATUS_EXPIRED
    assert status_of(NOW - timedelta(hours=1), NOW) == STATUS_EXPIRED


def test_status_never_returns_to_active_as_time_passes():
    expires_at = NOW + timedelta(hours=2)
    statuses = [status_of(expires_at, NOW + timedelta(minutes=m)) for m in range(0, 240, 15)]
    first_expired = statuses.index(STATUS_EXPIRED)
    assert all(s == STATUS_EXPIRED for s in statuses[first_expired:])


def test_hours_remaining_is_rounded_and_floored():
    assert hours_remaining(NOW + timedelta(minutes=90), NOW) == 1.5
    assert hours_remaining(NOW + timedelta(minutes=20), NOW) == 0.33
    assert hours_remaining(NOW - timedelta(hours=3), NOW) == 0


def test_reset_code_is_six_digits():
    for _ in range(50):
        code = generate_reset_code()
        assert len(code) == 6
        assert code.isdigit()


def test_tokens_are_unique_and_masked_in_logs():
    tokens = {generate_token() for _ in range(20)}
    assert len(tokens) == 20
    token = tokens.pop()
    assert mask_token(token) == f"{token[:8]}..."
    assert mask_token(None) is None


def test_plan_day_follows_weekday():
    assert plan_day_for(date(2026, 3, 9)) == 1   # Monday
    assert plan_day_for(date(2026, 3, 15)) == 7  # Sunday


def test_every_plan_covers_a_full_week():
    for diagnosis, plan in DIET_PLANS.items():
        assert len(plan['days']) == 7, diagnosis
        for day in plan['days']:
            assert day['breakfast'] and day['lunch'] and day['dinner']


def test_day_plan_out_of_range_or_unknown_diagnosis():
    assert get_day_plan('Hypertension', 0) is None
    assert get_day_plan('Hypertension', 8) is None
    assert get_day_plan('Migraine', 1) is None


def test_meal_items_for_date():
    monday = date(2026, 3, 9)
    items, notes = meal_items_for('Hypertension', 'dinner', monday)
    assert items == DIET_PLANS['Hypertension']['days'][0]['dinner']
    assert notes == DIET_PLANS['Hypertension']['days'][0]['notes']

    assert meal_items_for('Migraine', 'dinner', monday) == ([], None)


def test_operation_timer_records_and_flags_slow_operations(caplog):
    timer = OperationTimer(slow_threshold_ms=-1)
    with caplog.at_level(logging.WARNING):
        with timer.measure('db.query'):
            pass
    assert 'db.query' in timer.summary()
    assert 'Slow operation: db.query' in caplog.text


def test_operation_timers_do_not_share_state():
    first, second = OperationTimer(), OperationTimer()
    with first.measure('only.first'):
        pass
    assert second.summary() == {}
