# webheal/cli.py
"""
@file cli.py
@brief Command-line interface for webheal.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from selenium.common.exceptions import WebDriverException

from .browser import SUPPORTED_BROWSERS, start_browser
from .context import HealContext
from .eventlogger import EventLogger
from .exceptions import ElementNotFoundError, InvalidStrategyError
from .locator import LocatorDescriptor
from .settings import list_presets

log = logging.getLogger("webheal")


def _events_from_env() -> EventLogger:
    """Configure event logging from environment variables."""
    events = EventLogger()
    events.configure(
        console=True,
        file_path=os.getenv("WEBHEAL_EVENT_LOG_FILE"),
        level=os.getenv("WEBHEAL_EVENT_LOG_LEVEL", "INFO"),
        format=os.getenv("WEBHEAL_EVENT_LOG_FORMAT", "line"),
    )
    return events


def _write_report(path: str, report: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)


def _quit(driver: Any) -> None:
    try:
        driver.quit()
    except WebDriverException as e:
        log.error("Error closing browser: %s", e.msg)


def _probe(args: argparse.Namespace, context: HealContext) -> int:
    try:
        descriptor = LocatorDescriptor.of(args.by, args.value)
    except InvalidStrategyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    started = start_browser(args.browser, headless=args.headless, remote_url=args.remote_url)
    if not started.ok:
        print(json.dumps({"status": "error", "error": str(started.error)}, indent=2), file=sys.stderr)
        return 1

    driver = started.driver
    report: Dict[str, Any] = {"url": args.url, "locator": descriptor.to_dict()}
    try:
        session = context.session_for(driver)
        session.driver.navigate(args.url)
        outcome = session.resolve(descriptor)
    except ElementNotFoundError as e:
        report.update({
            "status": "not_found",
            "attempts": [{"kind": a.kind, **a.descriptor.to_dict(), "error": a.error} for a in e.attempts],
        })
        code = 2
    except WebDriverException as e:
        log.error("Probe of %s failed: %s", args.url, e.msg)
        report.update({"status": "error", "error": f"{type(e).__name__}: {e.msg}"})
        code = 1
    else:
        report.update({"status": "healed" if outcome.healed else "found", **outcome.to_dict()})
        code = 0
    finally:
        context.release(driver)
        _quit(driver)

    print(json.dumps(report, indent=2, ensure_ascii=False))
    if args.report:
        _write_report(args.report, report)
    return code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]

    p = argparse.ArgumentParser(
        prog="webheal",
        description="webheal - self-healing element location for Selenium tests",
    )
    p.add_argument("--config", "-c", default=None, help="Settings YAML (healing.enabled, healing.timeoutMs, ...)")
    p.add_argument("--preset", choices=sorted(list_presets()), default=None, help="Healing preset applied under the settings file")
    p.add_argument("--verbose", action="store_true", help="Log debug output")
    sub = p.add_subparsers(dest="cmd", required=True)

    # -------------------------
    # probe
    # -------------------------
    probe = sub.add_parser("probe", help="Open a page and resolve one locator, healing if needed")
    probe.add_argument("--url", "-u", required=True, help="Page to open")
    probe.add_argument("--by", "-b", required=True, help="Locator strategy (id, name, classname, css, xpath, linktext, partiallinktext, tagname)")
    probe.add_argument("--value", "-v", required=True, help="Locator value")
    probe.add_argument("--browser", choices=SUPPORTED_BROWSERS, default="chrome")
    probe.add_argument("--headed", dest="headless", action="store_false", help="Show the browser window")
    probe.add_argument("--remote-url", default=None, help="Selenium Grid URL")
    probe.add_argument("--timeout-ms", type=int, default=None, help="Override healing.timeoutMs")
    probe.add_argument("--no-heal", action="store_true", help="Disable healing for this run")
    probe.add_argument("--report", "-r", default=None, help="Write the outcome JSON to this path")

    # -------------------------
    # config
    # -------------------------
    sub.add_parser("config", help="Print the effective configuration")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: Dict[str, Any] = {}
    if args.cmd == "probe":
        overrides["timeout_ms"] = args.timeout_ms
        if args.no_heal:
            overrides["healing_enabled"] = False

    context = HealContext(args.config, preset=args.preset, overrides=overrides, events=_events_from_env())

    if args.cmd == "config":
        print(json.dumps(context.config.to_dict(), indent=2))
        return 0

    if args.cmd == "probe":
        return _probe(args, context)

    return 1


if __name__ == "__main__":
    sys.exit(main())
