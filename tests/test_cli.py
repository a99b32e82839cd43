# tests/test_cli.py
"""
Tests for the webheal command line.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException

from webheal.browser import BrowserStartResult
from webheal.cli import main
from webheal.exceptions import BrowserStartError


@pytest.fixture
def webdriver():
    wd = MagicMock()
    wd.current_url = "https://example.test/"
    return wd


def _probe(webdriver, *extra):
    argv = ["probe", "--url", "https://example.test/", "--timeout-ms", "0", *extra]
    with patch("webheal.cli.start_browser", return_value=BrowserStartResult(driver=webdriver)) as start:
        code = main(argv)
    return code, start


class TestConfigCommand:
    def test_prints_effective_config(self, tmp_path, capsys):
        path = tmp_path / "heal.yaml"
        path.write_text("healing.maxAttempts: 4\nhealing.service.apiKey: hush\n", encoding="utf-8")
        assert main(["--config", str(path), "--preset", "fast", "config"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["max_healing_attempts"] == 4
        assert data["timeout_ms"] == 5000
        assert data["service_api_key"] == "***"


class TestProbeCommand:
    """Tests for probe exit codes and reports."""

    def test_found(self, webdriver, capsys):
        code, start = _probe(webdriver, "--by", "id", "--value", "submit-btn")
        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["status"] == "found"
        assert report["healed"] is False
        webdriver.get.assert_called_once_with("https://example.test/")
        webdriver.quit.assert_called_once_with()
        assert start.call_args.kwargs["headless"] is True

    def test_healed(self, webdriver, capsys):
        def find_element(by, value):
            if by == "id":
                raise NoSuchElementException("no such element")
            return MagicMock()

        webdriver.find_element.side_effect = find_element
        code, _ = _probe(webdriver, "--by", "Id", "--value", "submit-btn")
        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["status"] == "healed"
        assert report["used"] == {"strategy": "css", "value": "#submit-btn"}

    def test_not_found(self, webdriver, capsys, tmp_path):
        webdriver.find_element.side_effect = NoSuchElementException("no such element")
        report_path = tmp_path / "out" / "report.json"
        code, _ = _probe(webdriver, "--by", "id", "--value", "gone", "--no-heal", "--report", str(report_path))
        assert code == 2
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["status"] == "not_found"
        assert [a["kind"] for a in report["attempts"]] == ["direct"]
        webdriver.quit.assert_called_once_with()

    def test_navigation_failure_reports_error(self, webdriver, capsys, tmp_path):
        """Should exit 1 with an error report when the page cannot be opened."""
        webdriver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")
        report_path = tmp_path / "report.json"
        code, _ = _probe(webdriver, "--by", "id", "--value", "a", "--report", str(report_path))
        assert code == 1
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["status"] == "error"
        assert "ERR_NAME_NOT_RESOLVED" in report["error"]
        webdriver.quit.assert_called_once_with()

    def test_quit_failure_keeps_outcome(self, webdriver, capsys):
        """Should log a failing quit without masking the probe result."""
        webdriver.quit.side_effect = WebDriverException("session gone")
        code, _ = _probe(webdriver, "--by", "id", "--value", "a")
        assert code == 0
        assert json.loads(capsys.readouterr().out)["status"] == "found"

    def test_invalid_strategy(self, webdriver, capsys):
        code, start = _probe(webdriver, "--by", "aria", "--value", "x")
        assert code == 1
        assert "aria" in capsys.readouterr().err
        start.assert_not_called()

    def test_browser_start_failure(self, capsys):
        failed = BrowserStartResult(error=BrowserStartError("chrome", "driver_error"))
        with patch("webheal.cli.start_browser", return_value=failed):
            code = main(["probe", "--url", "https://example.test/", "--by", "id", "--value", "a"])
        assert code == 1
        assert "driver_error" in capsys.readouterr().err
