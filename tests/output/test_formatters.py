"""Tests for the format_result dispatcher and OutputSettings."""

from __future__ import annotations

import json

import pytest

from wikiweave.output.formatters import OutputSettings, format_result
from wikiweave.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResult:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("backlinks", path="a.md", items=[])
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["ok"] is True
        assert data["op"] == "backlinks"
        assert data["data"]["path"] == "a.md"

    def test_json_mode_includes_errors(self) -> None:
        settings = OutputSettings(json_output=True)
        data = json.loads(format_result(_err(msg="nope"), settings=settings))
        assert data["ok"] is False
        assert data["error"]["message"] == "nope"

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(_ok(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["op"] == "test"

    def test_quiet_mode(self) -> None:
        result = _ok("orphans", items=[{"path": "a.md"}, {"path": "b.md"}])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "a.md\nb.md"

    def test_default_is_rich(self) -> None:
        output = format_result(_ok("custom", key="value"))
        assert "OK" in output
        assert "key: value" in output
