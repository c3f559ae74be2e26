"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from almanac.output.formatters import OutputSettings, format_result
from almanac.services.result import ServiceError, ServiceResult


def _ok(op: str = "lowest", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "lowest", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings()
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(_ok(answer=35), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["answer"] == 35

    def test_json_mode_error(self) -> None:
        output = format_result(_err(msg="Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["message"] == "Bad"

    def test_json_output_kwarg(self) -> None:
        data = json.loads(format_result(_ok(answer=1), json_output=True))
        assert data["ok"] is True

    def test_settings_overrides_kwarg(self) -> None:
        output = format_result(_ok(answer=35), settings=OutputSettings(), json_output=True)
        assert output == "Answer: 35"

    def test_quiet_mode(self) -> None:
        output = format_result(_ok(answer=46), settings=OutputSettings(quiet=True))
        assert output == "46"

    def test_human_mode(self) -> None:
        assert format_result(_ok(answer=35)) == "Answer: 35"

    def test_human_error(self) -> None:
        output = format_result(_err(msg="line 3: broken"))
        assert output.startswith("ERROR")
        assert "lowest" in output
        assert "line 3: broken" in output
