"""Tests for console output."""

import io

from annosync.application.maintenance import MaintenanceResult
from annosync.cli.output import Console


def render(result: MaintenanceResult) -> str:
    stream = io.StringIO()
    Console(stream=stream).maintenance_result("Retitle", result)
    return stream.getvalue()


class TestMaintenanceResult:
    """Tests for Console.maintenance_result()."""

    def test_changes_listed(self):
        result = MaintenanceResult(dry_run=False, issues_scanned=3, issues_matched=1, issues_updated=1)
        result.changes.append((7, "[Validation] x", "[Annotation] x"))

        text = render(result)

        assert "LIVE EXECUTION" in text
        assert "#7" in text
        assert "[Annotation] x" in text
        assert "Retitle finished" in text

    def test_errors_truncated(self):
        result = MaintenanceResult()
        for n in range(8):
            result.add_error(f"#{n}: forbidden")

        text = render(result)

        assert "8 issue(s) could not be updated" in text
        assert "#4: forbidden" in text
        assert "#5: forbidden" not in text
        assert "... and 3 more" in text
        assert "finished with errors" in text

    def test_no_color_when_not_a_terminal(self):
        assert "\033[" not in render(MaintenanceResult())
