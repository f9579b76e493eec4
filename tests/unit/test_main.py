"""Tests for the kopf wiring."""

from __future__ import annotations

import logging
from unittest.mock import Mock, patch

import kopf
import pytest

from secret_spreader import health, main
from secret_spreader.models import ReconcileAction
from secret_spreader.utils.errors import TransientApiError, UserInputError

BODY = {
    "apiVersion": "v1",
    "kind": "Secret",
    "metadata": {"name": "creds", "namespace": "default", "uid": "uid-1"},
}


class TestFilters:
    """Test cases for the handler filters."""

    def test_owns_finalizer(self):
        """Test detection of our finalizer."""
        assert main.owns_finalizer({"finalizers": [main.CONFIG.finalizer]}) is True
        assert main.owns_finalizer({"finalizers": ["other/finalizer"]}) is False
        assert main.owns_finalizer({}) is False

    def test_participates_with_annotation(self):
        """Test that annotated secrets participate."""
        assert main.participates({"annotations": {main.CONFIG.annotation_key: "ns-a"}}) is True

    def test_participates_with_finalizer_only(self):
        """Test that secrets with leftover replicas still participate."""
        assert main.participates({"finalizers": [main.CONFIG.finalizer]}) is True

    def test_unrelated_secret(self):
        """Test that other secrets are ignored."""
        assert main.participates({"annotations": {"app": "web"}}) is False
        assert main.participates({}) is False


class TestTimerFilters:
    """Test cases for the filters that pick the polling interval."""

    def test_annotated_secret_polled_at_sync_interval(self):
        """Test that annotated secrets use the drift timer only."""
        meta = {"annotations": {main.CONFIG.annotation_key: "ns-a"}, "finalizers": [main.CONFIG.finalizer]}
        assert main.requests_replication(meta) is True
        assert main.awaits_cleanup(meta) is False

    def test_finalizer_only_secret_polled_at_idle_interval(self):
        """Test that a secret whose annotation was removed uses the idle timer."""
        meta = {"finalizers": [main.CONFIG.finalizer]}
        assert main.requests_replication(meta) is False
        assert main.awaits_cleanup(meta) is True


class TestRunReconcile:
    """Test cases for run_reconcile function."""

    @patch("secret_spreader.main.get_reconciler")
    def test_success(self, mock_get_reconciler):
        """Test that the action is returned."""
        mock_get_reconciler.return_value.reconcile.return_value = ReconcileAction(requeue_after=60)

        action = main.run_reconcile(BODY, logging.getLogger("test"))

        assert action.requeue_after == 60
        source = mock_get_reconciler.return_value.reconcile.call_args[0][0]
        assert source.name == "creds"
        assert source.uid == "uid-1"

    @patch("secret_spreader.main.get_reconciler")
    def test_report_foreign_passed_through(self, mock_get_reconciler):
        """Test that periodic passes can silence foreign-secret events."""
        mock_get_reconciler.return_value.reconcile.return_value = ReconcileAction(requeue_after=60)

        main.run_reconcile(BODY, logging.getLogger("test"), report_foreign=False)

        assert mock_get_reconciler.return_value.reconcile.call_args[1] == {"report_foreign": False}

    @patch("secret_spreader.main.get_reconciler")
    def test_timer_silences_foreign_events(self, mock_get_reconciler):
        """Test that the drift timer runs with foreign reporting off."""
        mock_get_reconciler.return_value.reconcile.return_value = ReconcileAction(requeue_after=60)

        main.resync_secret(body=BODY, logger=logging.getLogger("test"))

        assert mock_get_reconciler.return_value.reconcile.call_args[1] == {"report_foreign": False}

    @patch("secret_spreader.main.get_reconciler")
    def test_api_error_becomes_temporary(self, mock_get_reconciler):
        """Test that API failures are retried after the backoff."""
        mock_get_reconciler.return_value.reconcile.side_effect = TransientApiError(
            "patch secret default/creds", Mock(status=500, reason="Internal Server Error")
        )

        with pytest.raises(kopf.TemporaryError) as exc_info:
            main.run_reconcile(BODY, logging.getLogger("test"))

        assert exc_info.value.delay == main.CONFIG.error_backoff_seconds
        assert "500" in str(exc_info.value)

    @patch("secret_spreader.main.get_reconciler")
    def test_user_error_becomes_temporary(self, mock_get_reconciler):
        """Test that user input errors are retried too."""
        mock_get_reconciler.return_value.reconcile.side_effect = UserInputError("Expected Secret resource to have a uid")

        with pytest.raises(kopf.TemporaryError):
            main.run_reconcile(BODY, logging.getLogger("test"))

    @patch("secret_spreader.main.get_reconciler")
    def test_unexpected_error_propagates(self, mock_get_reconciler):
        """Test that programming errors are left to kopf."""
        mock_get_reconciler.return_value.reconcile.side_effect = KeyError("boom")

        with pytest.raises(KeyError):
            main.run_reconcile(BODY, logging.getLogger("test"))


class TestLifecycle:
    """Test cases for startup and cleanup handlers."""

    @patch("secret_spreader.main.structured_logging.setup_structured_logging")
    @patch("secret_spreader.main.health.start_metrics_server")
    def test_configure(self, mock_start, mock_setup_logging, monkeypatch):
        """Test operator settings and metrics server startup."""
        monkeypatch.delenv("MAX_WORKERS", raising=False)
        monkeypatch.setenv("METRICS_PORT", "9090")
        settings = Mock()

        main.configure(settings)

        mock_setup_logging.assert_called_once()
        mock_start.assert_called_once_with(9090)
        assert settings.posting.level == logging.WARNING
        assert settings.execution.max_workers == 4
        assert isinstance(settings.persistence.progress_storage, kopf.AnnotationsProgressStorage)
        assert isinstance(settings.persistence.diffbase_storage, main.DigestDiffBaseStorage)
        assert health._ready.is_set()

        main.shutdown()
        assert not health._ready.is_set()
