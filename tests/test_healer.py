# tests/test_healer.py
"""
Tests for healing candidate generation and the healing resolver.
"""

from unittest.mock import MagicMock

import pytest

from webheal.config import ResolutionConfig
from webheal.healer import (HealingResolver, builtin_candidates, candidates_for,
                            looks_like_text, xpath_literal, xpath_to_css)
from webheal.locator import (LocatorDescriptor, Strategy, by_css, by_id,
                             by_link_text, by_name, by_partial_link_text,
                             by_xpath)


class TestXPathToCss:
    """Tests for simple XPath translation."""

    @pytest.mark.parametrize("xpath,css", [
        ("//div[@class='x']", 'div[class="x"]'),
        ("//input[@id='email']", "input#email"),
        ("//*[@id=\"main\"]", "#main"),
        ("//button[@type='submit']", 'button[type="submit"]'),
        ("//*[@data-test='login btn']", '[data-test="login btn"]'),
        ("//div[@class='a b']", 'div[class="a b"]'),
        ("//input[@id='user.name']", 'input[id="user.name"]'),
    ])
    def test_translates_attribute_equality(self, xpath, css):
        """Should translate single attribute-equality expressions."""
        assert xpath_to_css(xpath) == css

    @pytest.mark.parametrize("xpath", [
        "//div[contains(@class,'x')]",
        "//div/span[@id='a']",
        "//a[text()='Home']",
        "(//div[@id='a'])[2]",
        "//div[@xml:lang='en']",
    ])
    def test_skips_complex_expressions(self, xpath):
        """Should return None for anything beyond a simple equality."""
        assert xpath_to_css(xpath) is None


class TestLooksLikeText:
    """Tests for the human-readable text heuristic."""

    @pytest.mark.parametrize("value", ["Sign in", "Contact", "About Us", "Don't miss out"])
    def test_text_values(self, value):
        assert looks_like_text(value)

    @pytest.mark.parametrize("value", ["submit-btn", "email", "#main", "//div", "div.x", "btn_1", "123", "  "])
    def test_selector_like_values(self, value):
        assert not looks_like_text(value)


class TestXPathLiteral:
    """Tests for XPath string quoting."""

    def test_plain(self):
        assert xpath_literal("Home") == "'Home'"

    def test_single_quote(self):
        assert xpath_literal("Don't") == '"Don\'t"'

    def test_both_quotes(self):
        assert xpath_literal("a'b\"c") == "concat('a', \"'\", 'b\"c')"


class TestCandidates:
    """Tests for candidate ordering."""

    def test_id_candidates(self):
        """Should propose Css('#v') then Name(v) for Id."""
        assert builtin_candidates(by_id("submit-btn")) == [by_css("#submit-btn"), by_name("submit-btn")]

    def test_id_with_selector_characters(self):
        """Should match the whole id, not parse dots as class selectors."""
        assert builtin_candidates(by_id("user.name")) == [by_css('[id="user.name"]'), by_name("user.name")]

    def test_xpath_candidates(self):
        """Should propose the CSS translation for simple XPath."""
        assert builtin_candidates(by_xpath("//div[@class='x']")) == [by_css('div[class="x"]')]

    def test_complex_xpath_has_no_candidates(self):
        assert builtin_candidates(by_xpath("//div[contains(@class,'x')]")) == []

    def test_link_text_candidates(self):
        """Should propose PartialLinkText then a visible-text match."""
        candidates = builtin_candidates(by_link_text("About Us"))
        assert candidates[0] == by_partial_link_text("About Us")
        assert candidates[1] == by_xpath("//*[normalize-space(text())='About Us']")
        assert len(candidates) == 2

    def test_text_fallback_is_last(self):
        """Should append the visible-text match after strategy-specific candidates."""
        candidates = builtin_candidates(by_id("Contact"))
        assert candidates == [
            by_css("#Contact"),
            by_name("Contact"),
            by_xpath("//*[normalize-space(text())='Contact']"),
        ]

    def test_other_strategies_without_text(self):
        assert builtin_candidates(LocatorDescriptor(Strategy.TAG_NAME, "button")) == []

    def test_service_candidates_appended_and_deduplicated(self):
        """Should append service proposals after built-ins, dropping duplicates and the original."""
        service = MagicMock()
        service.propose.return_value = [by_name("submit-btn"), by_id("submit-btn"), by_css("button.primary")]
        candidates = candidates_for(by_id("submit-btn"), service, page_url="https://x.test/")
        assert candidates == [by_css("#submit-btn"), by_name("submit-btn"), by_css("button.primary")]
        service.propose.assert_called_once_with(by_id("submit-btn"), page_url="https://x.test/")

    def test_limit_skips_service_when_builtins_fill_it(self):
        """Should not ask the service when built-in candidates already reach the limit."""
        service = MagicMock()
        assert candidates_for(by_id("a"), service, limit=2) == [by_css("#a"), by_name("a")]
        service.propose.assert_not_called()

    def test_limit_truncates_service_candidates(self):
        service = MagicMock()
        service.propose.return_value = [by_css("button.a"), by_css("button.b")]
        assert candidates_for(by_id("a"), service, limit=3) == [by_css("#a"), by_name("a"), by_css("button.a")]


class TestHealingResolver:
    """Tests for the bounded healing loop."""

    def test_first_success_wins(self, driver, config, events):
        """Should stop at the first candidate that resolves."""
        driver.add(by_css("#submit-btn"), "button")
        driver.add(by_name("submit-btn"), "other")
        result = HealingResolver(driver, config, events=events).heal(by_id("submit-btn"))

        assert result.healed
        assert result.used == by_css("#submit-btn")
        assert result.element.label == "button"
        assert driver.find_one_calls == [by_css("#submit-btn")]

    def test_tries_in_order(self, driver, config):
        """Should fall through to later candidates."""
        driver.add(by_name("submit-btn"), "named")
        result = HealingResolver(driver, config).heal(by_id("submit-btn"))

        assert result.used == by_name("submit-btn")
        assert [a.descriptor for a in result.attempts] == [by_css("#submit-btn"), by_name("submit-btn")]
        assert result.attempts[0].error is not None
        assert result.attempts[1].error is None

    def test_bounded_by_max_attempts(self, driver):
        """Should not try more candidates than max_healing_attempts."""
        driver.add(by_name("submit-btn"), "named")
        config = ResolutionConfig(timeout_ms=0, max_healing_attempts=1)
        result = HealingResolver(driver, config).heal(by_id("submit-btn"))

        assert not result.healed
        assert len(result.attempts) == 1
        assert driver.find_one_calls == [by_css("#submit-btn")]

    def test_zero_attempts(self, driver):
        config = ResolutionConfig(max_healing_attempts=0)
        result = HealingResolver(driver, config).heal(by_id("a"))
        assert not result.healed
        assert result.attempts == []

    def test_logs_each_attempt(self, driver, config, events):
        """Should emit a heal_attempt event per candidate."""
        driver.add(by_name("submit-btn"), "named")
        HealingResolver(driver, config, events=events).heal(by_id("submit-btn"))

        heal_events = [e for e in events.history if e["event"] == "heal_attempt"]
        assert [e["status"] for e in heal_events] == ["failed", "healed"]
        assert heal_events[0]["locator"] == "Id('submit-btn')"
        assert heal_events[0]["candidate"] == "Css('#submit-btn')"

    def test_no_events_when_disabled(self, driver, events):
        """Should stay quiet when log_healing_events is false."""
        config = ResolutionConfig(max_healing_attempts=3, log_healing_events=False)
        HealingResolver(driver, config, events=events).heal(by_id("submit-btn"))
        assert events.history == []

    def test_passes_page_url_to_service(self, driver, config):
        """Should send the current page URL to the healing service."""
        service = MagicMock()
        service.propose.return_value = []
        HealingResolver(driver, config, service=service).heal(by_id("a"))
        service.propose.assert_called_once_with(by_id("a"), page_url="https://example.test/")

    def test_service_not_called_when_budget_spent(self, driver):
        """Should skip the service request when built-ins use every attempt."""
        service = MagicMock()
        config = ResolutionConfig(timeout_ms=0, max_healing_attempts=1)
        result = HealingResolver(driver, config, service=service).heal(by_id("x"))

        assert not result.healed
        service.propose.assert_not_called()
        assert driver.find_one_calls == [by_css("#x")]

    def test_service_candidate_used_when_room_left(self, driver):
        service = MagicMock()
        service.propose.return_value = [by_css("button.primary")]
        driver.add(by_css("button.primary"), "primary")
        config = ResolutionConfig(timeout_ms=0, max_healing_attempts=3)
        result = HealingResolver(driver, config, service=service).heal(by_id("x"))

        assert result.used == by_css("button.primary")
        assert len(result.attempts) == 3
