"""Tests for the PIX key expiry sweep."""

import threading
import pytest
from datetime import timedelta

from betconta.domain.expiry import ExpiryScanner


def test_sweep_closes_keys_older_than_lifetime(pix_registry, expiry_scanner, sample_child, now):
    """A key created 73 hours ago is closed, one created 71 hours ago stays active."""
    old = pix_registry.activate(sample_child.id, "CPF", now=now - timedelta(hours=73))
    fresh = pix_registry.activate(sample_child.id, "Email", now=now - timedelta(hours=71))

    assert expiry_scanner.sweep(now) == 1

    closed = pix_registry.get(old.id)
    assert closed.is_active is False
    assert closed.closed_at == now
    assert pix_registry.get(fresh.id).is_active is True


def test_sweep_leaves_manually_closed_keys_alone(pix_registry, expiry_scanner, sample_child, now):
    record = pix_registry.activate(sample_child.id, "CPF", now=now - timedelta(hours=100))
    closed_at = now - timedelta(hours=90)
    pix_registry.deactivate(sample_child.id, "CPF", now=closed_at)

    assert expiry_scanner.sweep(now) == 0
    assert pix_registry.get(record.id).closed_at == closed_at


def test_sweep_is_idempotent(pix_registry, expiry_scanner, sample_child, now):
    pix_registry.activate(sample_child.id, "Random", now=now - timedelta(days=4))

    assert expiry_scanner.sweep(now) == 1
    assert expiry_scanner.sweep(now + timedelta(minutes=5)) == 0


def test_sweep_spans_children(pix_registry, expiry_scanner, sample_child, other_child, now):
    pix_registry.activate(sample_child.id, "CPF", now=now - timedelta(hours=80))
    pix_registry.activate(other_child.id, "CPF", now=now - timedelta(hours=80))
    pix_registry.activate(other_child.id, "Email", now=now - timedelta(hours=1))

    assert expiry_scanner.sweep(now) == 2
    assert pix_registry.get_active(other_child.id, "Email") is not None


def test_sweep_with_no_keys(expiry_scanner, now):
    assert expiry_scanner.sweep(now) == 0


class TestRun:
    """Tests for the sweep loop."""

    def test_single_sweep(self, pix_registry, expiry_scanner, sample_child):
        record = pix_registry.activate(sample_child.id, "CPF")
        pix_registry.activate(sample_child.id, "Email", now=record.created_at - timedelta(days=5))

        assert expiry_scanner.run(interval=0.01, max_sweeps=1) == 1
        assert pix_registry.get_active(sample_child.id, "Email") is None
        assert pix_registry.get_active(sample_child.id, "CPF") is not None

    def test_stops_when_event_set(self, expiry_scanner):
        stop = threading.Event()
        stop.set()
        assert expiry_scanner.run(interval=60, stop_event=stop) == 0

    def test_rejects_non_positive_interval(self, expiry_scanner):
        with pytest.raises(ValueError, match="must be positive"):
            expiry_scanner.run(interval=0)

    def test_failed_sweep_does_not_stop_loop(self, temp_db, monkeypatch):
        scanner = ExpiryScanner(temp_db)
        calls = []

        def flaky_sweep(now=None):
            calls.append(now)
            if len(calls) == 1:
                raise RuntimeError("database is locked")
            return 3

        monkeypatch.setattr(scanner, "sweep", flaky_sweep)

        assert scanner.run(interval=0.01, max_sweeps=2) == 3
        assert len(calls) == 2
