"""Tests for application commands."""

import pytest
from unittest.mock import Mock

from annosync.application.commands import (
    CommandResult,
    CreateIssueCommand,
    UpdateIssueCommand,
)
from annosync.core.domain.events import EventBus, IssueCreated, IssueUpdated
from annosync.core.ports.issue_tracker import IssueData, IssueTrackerError, RepositoryRef


REPO = RepositoryRef("acme", "notes")


class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok(self):
        result = CommandResult.ok("data")
        assert result.success
        assert result.data == "data"
        assert not result.dry_run

    def test_ok_dry_run(self):
        result = CommandResult.ok("data", dry_run=True)
        assert result.success
        assert result.dry_run

    def test_fail(self):
        result = CommandResult.fail("error message")
        assert not result.success
        assert result.error == "error message"

    def test_skip(self):
        result = CommandResult.skip("reason")
        assert result.success
        assert result.skipped


class TestCreateIssueCommand:
    """Tests for CreateIssueCommand."""

    @pytest.fixture
    def mock_tracker(self):
        tracker = Mock()
        tracker.create_issue.return_value = IssueData(number=12, title="[Annotation] x")
        return tracker

    def test_validate_missing_title(self, mock_tracker):
        cmd = CreateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            title="",
            body="body",
        )
        assert cmd.validate() is not None

    def test_execute_dry_run(self, mock_tracker):
        cmd = CreateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            title="[Annotation] x",
            body="body",
            dry_run=True,
        )

        result = cmd.execute()

        assert result.success
        assert result.dry_run
        mock_tracker.create_issue.assert_not_called()

    def test_execute_success(self, mock_tracker):
        bus = EventBus()
        cmd = CreateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            title="[Annotation] x",
            body="body",
            labels=["annotation"],
            event_bus=bus,
        )

        result = cmd.execute()

        assert result.success
        assert result.data.number == 12
        mock_tracker.create_issue.assert_called_once_with(
            REPO, "[Annotation] x", "body", labels=["annotation"]
        )
        event = bus.get_history()[0]
        assert isinstance(event, IssueCreated)
        assert event.labels == ("annotation",)

    def test_execute_failure(self, mock_tracker):
        mock_tracker.create_issue.side_effect = IssueTrackerError("Validation failed")
        bus = EventBus()
        cmd = CreateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            title="[Annotation] x",
            body="body",
            event_bus=bus,
        )

        result = cmd.execute()

        assert not result.success
        assert "Validation failed" in result.error
        assert bus.get_history() == []


class TestUpdateIssueCommand:
    """Tests for UpdateIssueCommand."""

    @pytest.fixture
    def mock_tracker(self):
        tracker = Mock()
        tracker.update_issue.return_value = IssueData(number=3)
        return tracker

    def test_validate_missing_number(self, mock_tracker):
        cmd = UpdateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            number=0,
            title="t",
        )
        assert cmd.validate() is not None

    def test_validate_nothing_to_update(self, mock_tracker):
        cmd = UpdateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            number=3,
        )
        assert cmd.validate() is not None

    def test_execute_invalid(self, mock_tracker):
        result = UpdateIssueCommand(tracker=mock_tracker, repository=REPO, number=3).execute()

        assert not result.success
        mock_tracker.update_issue.assert_not_called()

    def test_execute_dry_run(self, mock_tracker):
        cmd = UpdateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            number=3,
            title="new",
            dry_run=True,
        )

        result = cmd.execute()

        assert result.success
        assert result.dry_run
        mock_tracker.update_issue.assert_not_called()

    def test_execute_success(self, mock_tracker):
        bus = EventBus()
        cmd = UpdateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            number=3,
            body="new body",
            event_bus=bus,
        )

        result = cmd.execute()

        assert result.success
        mock_tracker.update_issue.assert_called_once_with(
            REPO, 3, title=None, body="new body", labels=None
        )
        event = bus.get_history()[0]
        assert isinstance(event, IssueUpdated)
        assert event.body_changed
        assert event.labels is None

    def test_execute_failure(self, mock_tracker):
        mock_tracker.update_issue.side_effect = IssueTrackerError("Not found")

        cmd = UpdateIssueCommand(
            tracker=mock_tracker,
            repository=REPO,
            number=3,
            title="t",
        )

        result = cmd.execute()

        assert not result.success
        assert result.error == "Not found"
