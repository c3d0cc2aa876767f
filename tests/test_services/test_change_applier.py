"""
Tests for the change-set applier.

Tests commit ordering and create/update selection.
"""

import pytest
from unittest.mock import call

from issue_resolver.exceptions import RemoteError, RemoteWriteConflict
from issue_resolver.models.schemas import CodeChange
from issue_resolver.services.change_applier import ChangeSetApplier


class TestChangeSetApplier:
    """Tests for ChangeSetApplier class."""

    @pytest.mark.asyncio
    async def test_writes_in_input_order(self, mock_github_service):
        """Test one write per change, in order."""
        changes = [
            CodeChange(path=name, content=f"{name}\n", message=f"Write {name}")
            for name in ("a.py", "b.py", "c.py")
        ]
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("ai-pr/7", changes)

        written = [
            c.kwargs["path"] for c in mock_github_service.create_or_update_file.call_args_list
        ]
        assert written == ["a.py", "b.py", "c.py"]

    @pytest.mark.asyncio
    async def test_create_omits_sha(self, mock_github_service, sample_changes):
        """Test new files are written without a sha."""
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("ai-pr/7", sample_changes[:1])

        mock_github_service.get_content.assert_awaited_once_with("src/calculator.py", "ai-pr/7")
        mock_github_service.create_or_update_file.assert_awaited_once_with(
            path="src/calculator.py",
            content=sample_changes[0].content,
            message="Guard against division by zero",
            branch="ai-pr/7",
        )

    @pytest.mark.asyncio
    async def test_update_sends_existing_sha(
        self, mock_github_service, sample_changes, existing_file
    ):
        """Test existing files are written with their current sha."""
        mock_github_service.get_content.return_value = existing_file
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("ai-pr/7", sample_changes[:1])

        kwargs = mock_github_service.create_or_update_file.call_args.kwargs
        assert kwargs["sha"] == "f00dbabe1234"

    @pytest.mark.asyncio
    async def test_message_prefix(self, mock_github_service, sample_changes):
        """Test prefix is prepended to every commit message."""
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("ai-pr/7", sample_changes, message_prefix="AI Update: ")

        messages = [
            c.kwargs["message"] for c in mock_github_service.create_or_update_file.call_args_list
        ]
        assert messages == [
            "AI Update: Guard against division by zero",
            "AI Update: Add divide test",
        ]

    @pytest.mark.asyncio
    async def test_empty_change_set(self, mock_github_service):
        """Test nothing is written for no changes."""
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("ai-pr/7", [])

        mock_github_service.get_content.assert_not_awaited()
        mock_github_service.create_or_update_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, mock_github_service, sample_changes):
        """Test a failed write aborts the rest."""
        mock_github_service.create_or_update_file.side_effect = RemoteWriteConflict(
            "Conflict", 409
        )
        applier = ChangeSetApplier(mock_github_service)

        with pytest.raises(RemoteWriteConflict):
            await applier.apply("ai-pr/7", sample_changes)

        assert mock_github_service.create_or_update_file.await_count == 1

    @pytest.mark.asyncio
    async def test_lookup_failure_propagates(self, mock_github_service, sample_changes):
        """Test lookup errors other than missing files are raised."""
        mock_github_service.get_content.side_effect = RemoteError("boom", 500)
        applier = ChangeSetApplier(mock_github_service)

        with pytest.raises(RemoteError):
            await applier.apply("ai-pr/7", sample_changes)

        mock_github_service.create_or_update_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_on_target_branch(self, mock_github_service, sample_changes):
        """Test existence is checked on the branch being written."""
        applier = ChangeSetApplier(mock_github_service)

        await applier.apply("feature/x", sample_changes)

        assert mock_github_service.get_content.await_args_list == [
            call("src/calculator.py", "feature/x"),
            call("tests/test_calculator.py", "feature/x"),
        ]

    @pytest.mark.asyncio
    async def test_metric_recorded(self, mock_github_service, sample_changes, telemetry):
        """Test applied change count is reported."""
        applier = ChangeSetApplier(mock_github_service, telemetry)

        await applier.apply("ai-pr/7", sample_changes)

        metric = telemetry.events[-1]
        assert metric.properties["metric_name"] == "changes_applied"
        assert metric.properties["value"] == 2.0
