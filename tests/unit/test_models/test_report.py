"""Tests for ValidationReport."""

from scubaconfig.models.report import ConfigWarning, ValidationReport, WarningCode


def test_empty_report_is_ok() -> None:
    """A report with no warnings is ok."""
    assert ValidationReport().ok is True


def test_add_records_warning() -> None:
    """Added warnings are recorded with their code and policy id."""
    report = ValidationReport()
    report.add(WarningCode.MISSING_RATIONALE, "no rationale", "MS.EXO.1.1v1")
    assert report.ok is False
    assert report.warnings == [
        ConfigWarning(code=WarningCode.MISSING_RATIONALE, message="no rationale", policy_id="MS.EXO.1.1v1")
    ]


def test_by_code_and_extend() -> None:
    """Reports can be merged and filtered by code."""
    first = ValidationReport()
    first.add(WarningCode.UNKNOWN_SETTING, "a")
    second = ValidationReport()
    second.add(WarningCode.UNKNOWN_PRODUCT, "b")
    second.add(WarningCode.UNKNOWN_SETTING, "c")

    first.extend(second)

    assert len(first.warnings) == 3
    assert [w.message for w in first.by_code(WarningCode.UNKNOWN_SETTING)] == ["a", "c"]
