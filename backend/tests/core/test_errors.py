"""Tests for the error hierarchy: codes, categories, REST envelope."""

from littlelemon.core.errors import (
    DecodeFailure,
    ErrorCategory,
    ErrorContext,
    MenuCacheError,
    NetworkFailure,
    PersistenceFailure,
    RuntimeNotReadyError,
)


def test_sync_failures_share_the_base_type():
    for err in (
        NetworkFailure("down"),
        DecodeFailure("bad"),
        PersistenceFailure("locked", "replace_all"),
    ):
        assert isinstance(err, MenuCacheError)


def test_network_failure_category_depends_on_timeout():
    assert NetworkFailure("x").category == ErrorCategory.EXTERNAL_API
    assert NetworkFailure("x", timed_out=True).category == ErrorCategory.TIMEOUT


def test_to_response_envelope():
    err = PersistenceFailure(
        "disk full", "replace_all", context=ErrorContext(sync_id="abc123"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "PERSISTENCE_FAILURE"
    assert body["category"] == "database"
    assert body["severity"] == "critical"
    assert body["context"]["sync_id"] == "abc123"
    assert "replace_all" in body["message"]


def test_envelope_omits_context_when_nothing_is_known():
    body = NetworkFailure("down").to_response()["error"]
    assert "context" not in body


def test_envelope_carries_only_known_context_fields():
    err = NetworkFailure("HTTP 502", context=ErrorContext(status_code=502))
    assert err.to_response()["error"]["context"] == {"upstream_status": 502}


def test_only_runtime_not_ready_asks_clients_to_retry():
    assert RuntimeNotReadyError().retry_after == 5
    assert PersistenceFailure("locked", "load").retry_after is None
