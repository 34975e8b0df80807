from datetime import datetime, timedelta, timezone

import pytest

from storefront.core.errors import ValidationError
from storefront.services.pause import (NO_PAUSE, apply_pause, clear_pause,
                                       effective_pause, stored_pause)
from tests.conftest import MONDAY, at

NOW = at(MONDAY, 10)


def test_pause_with_duration_sets_expiry(make_store):
    store = make_store()

    pause = apply_pause(store, 30, "  lunch break ", NOW)

    assert pause.active
    assert pause.reason == "lunch break"
    assert pause.started_at == NOW
    assert pause.expires_at == NOW + timedelta(minutes=30)
    assert pause.minutes == 30
    assert store.pause_active
    assert store.pause_expires_at == datetime(2024, 6, 3, 13, 30)


def test_zero_minutes_pauses_indefinitely(make_store):
    store = make_store()

    pause = apply_pause(store, 0, "reforma", NOW)

    assert pause.expires_at is None
    assert effective_pause(store, NOW + timedelta(days=30)).active


@pytest.mark.parametrize("minutes", [-1, -0.5, float("nan"), float("inf"), True, "10", None])
def test_invalid_duration_is_rejected_without_mutation(make_store, minutes):
    store = make_store()

    with pytest.raises(ValidationError):
        apply_pause(store, minutes, "x", NOW)

    assert not store.pause_active
    assert store.pause_started_at is None


def test_naive_now_is_a_programming_error(make_store):
    with pytest.raises(ValueError):
        apply_pause(make_store(), 10, "x", datetime(2024, 6, 3, 10))


def test_lazy_expiry(make_store):
    store = make_store()
    apply_pause(store, 60, "sem entregador", NOW)

    assert effective_pause(store, NOW + timedelta(minutes=59)).active
    assert effective_pause(store, NOW + timedelta(minutes=60)) == NO_PAUSE
    assert effective_pause(store, NOW + timedelta(hours=5)) == NO_PAUSE
    # the persisted record is untouched by reads
    assert store.pause_active


def test_expiry_compares_instants_across_timezones(make_store):
    store = make_store()
    apply_pause(store, 60, "x", NOW)

    utc_before = (NOW + timedelta(minutes=30)).astimezone(timezone.utc)

    assert effective_pause(store, utc_before).active


def test_repause_overwrites_timer_and_reason(make_store):
    store = make_store()
    apply_pause(store, 10, "first", NOW)

    later = NOW + timedelta(minutes=5)
    pause = apply_pause(store, 60, "second", later)

    assert stored_pause(store).reason == "second"
    assert pause.expires_at == later + timedelta(minutes=60)


def test_resume_is_idempotent(make_store):
    store = make_store()
    apply_pause(store, 10, "x", NOW)

    assert clear_pause(store) is True
    assert stored_pause(store) == NO_PAUSE
    assert clear_pause(store) is False
    assert stored_pause(store) == NO_PAUSE


def test_pause_never_touches_block(make_store):
    store = make_store(blocked=True, block_reason="fraude", is_active=False)

    apply_pause(store, 10, "x", NOW)
    clear_pause(store)

    assert store.blocked
    assert store.block_reason == "fraude"
    assert store.is_active is False
