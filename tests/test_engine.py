"""Unit tests for the deterministic engine components (styles, prompts, extraction, errors, URLs)."""

from __future__ import annotations

import pytest

from engine.errors import (
    CompletionError,
    ContentError,
    FetchError,
    UrlError,
    ValidationFailure,
    classify_error,
    classify_message,
)
from engine.extractor import extract
from engine.prompt_builder import build_system_prompt, build_user_prompt
from engine.style_resolver import PRESET_STYLES, ResolvedStyle, normalize_style, parse_path, resolve
from engine.url_normalizer import normalize_url
from prompts.system_prompt import END_MARKER, START_MARKER
from schemas.response import ErrorCode


# ── Style resolver tests ───────────────────────────────────────────────

class TestStyleResolver:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Seinfeld", "seinfeld-standup"),
            ("Jerry-Seinfeld", "seinfeld-standup"),
            ("jerry_seinfeld", "seinfeld-standup"),
            ("  PIRATE speak ", "piratetalk"),
            ("Click_Bait", "clickbait"),
            ("E.L.I.5", "eli5"),
            ("Explain Like I'm Five", "eli5"),
            ("TWITTER", "tweet"),
        ],
    )
    def test_aliases_ignore_case_punctuation_and_hyphenation(self, raw, expected):
        assert resolve(raw).style_id == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "!!!"])
    def test_empty_token_is_standard(self, raw):
        style = resolve(raw)
        assert style.style_id == "standard"
        assert not style.is_custom

    def test_numeric_token_is_bullets_with_count(self):
        style = resolve("3")
        assert style.style_id == "bullets"
        assert style.bullet_count == 3

    def test_zero_count_falls_back_to_default(self):
        assert resolve("0").bullet_count == 5

    @pytest.mark.parametrize("raw, count", [("7 bullets", 7), ("10points", 10), ("4 keypoints", 4)])
    def test_counted_bullet_tokens(self, raw, count):
        style = resolve(raw)
        assert style.is_bullet_style
        assert style.bullet_count == count

    def test_explicit_count_applies_to_bullets_only(self):
        assert resolve("bullets", 4).bullet_count == 4
        assert resolve("bullet points").bullet_count == 5
        assert resolve("eli5", 4).bullet_count is None

    def test_numeric_token_count_wins_over_explicit(self):
        assert resolve("3", 8).bullet_count == 3

    def test_unknown_style_is_custom(self):
        style = resolve("Shakespearean Sonnet")
        assert style.style_id == "shakespearean-sonnet"
        assert style.is_custom

    def test_presets_are_not_custom(self):
        for style_id in PRESET_STYLES:
            assert not resolve(style_id).is_custom

    def test_normalize_collapses_hyphens(self):
        assert normalize_style("--Very   Formal--") == "very-formal"


class TestPathParsing:
    def test_style_segment(self):
        parsed = parse_path("/eli5/example.com/post")
        assert parsed.style.style_id == "eli5"
        assert parsed.target == "example.com/post"

    def test_numeric_segment_is_bullet_count(self):
        parsed = parse_path("3/example.com")
        assert parsed.style == ResolvedStyle(style_id="bullets", bullet_count=3)
        assert parsed.target == "example.com"

    def test_alias_segment(self):
        assert parse_path("pirate/example.com").style.style_id == "piratetalk"

    def test_domain_first_path_uses_standard(self):
        parsed = parse_path("example.com/post")
        assert parsed.style.style_id == "standard"
        assert parsed.target == "example.com/post"

    def test_protocol_url_uses_standard(self):
        parsed = parse_path("https://example.com/a")
        assert parsed.style.style_id == "standard"
        assert parsed.target == "https://example.com/a"

    def test_empty_path(self):
        parsed = parse_path("/")
        assert parsed.style.style_id == "standard"
        assert parsed.target == ""


# ── Prompt builder tests ───────────────────────────────────────────────

class TestPromptBuilder:
    def test_bullet_prompt_carries_count(self):
        prompt = build_system_prompt(ResolvedStyle(style_id="bullets", bullet_count=3))
        assert "EXACTLY 3 numbered" in prompt

    @pytest.mark.parametrize("style_id", list(PRESET_STYLES))
    def test_every_prompt_demands_markers(self, style_id):
        prompt = build_system_prompt(resolve(style_id))
        assert START_MARKER in prompt
        assert END_MARKER in prompt

    def test_custom_style_is_quoted(self):
        prompt = build_system_prompt(resolve("haiku"))
        assert 'CUSTOM STYLE: "haiku"' in prompt

    def test_url_user_prompt_forbids_url_inference(self):
        prompt = build_user_prompt("Body text.", resolve("concise"), source_url="https://example.com/a")
        assert "https://example.com/a" in prompt
        assert "Do NOT infer" in prompt
        assert prompt.endswith("Body text.")

    def test_content_user_prompt(self):
        prompt = build_user_prompt("Body text.", resolve("5"))
        assert "5-point bullets" in prompt
        assert "PAGE CONTENT" not in prompt
        assert prompt.endswith("Body text.")


# ── Extractor tests ────────────────────────────────────────────────────

class TestExtractor:
    def test_marker_round_trip(self):
        text = "The cat sat on the mat."
        assert extract(f"{START_MARKER}\n{text}\n{END_MARKER}") == text

    @pytest.mark.parametrize(
        "text",
        [
            "#1 rule of the club is to keep quiet.",
            "#climate is trending again today.",
            "Ranked #1 in the region for the third year.",
        ],
    )
    def test_round_trip_keeps_leading_hashes(self, text):
        assert extract(f"{START_MARKER}\n{text}\n{END_MARKER}") == text

    def test_markdown_heading_still_stripped(self):
        assert extract("## Key Points\nThree things matter.") == "Key Points\nThree things matter."

    def test_text_outside_markers_is_dropped(self):
        raw = f"Sure thing!\n{START_MARKER}\nOnly this part.\n{END_MARKER}\nHope it helps."
        assert extract(raw) == "Only this part."

    def test_lowercase_hashed_markers(self):
        assert extract("## start ##\nhello world summary\n## end ##") == "hello world summary"

    def test_bare_marker_pair(self):
        assert extract("START The quick summary. END") == "The quick summary."

    def test_start_marker_only(self):
        assert extract(f"Sure!\n{START_MARKER}\nOnly the body remains") == "Only the body remains"

    def test_numbered_lines_survive(self):
        raw = f"{START_MARKER}\n1. First point\n2. Second point\n{END_MARKER}"
        assert extract(raw) == "1. First point\n2. Second point"

    def test_preamble_stripped(self):
        raw = "Here's a summary of the article:\nThe economy grew by three percent last year."
        assert extract(raw) == "The economy grew by three percent last year."

    def test_bold_banner_stripped(self):
        assert extract("**Executive Summary:**\nPoint one is here.") == "Point one is here."

    def test_closing_banner_stripped(self):
        assert extract("The plan has three phases.\n**The End**") == "The plan has three phases."

    def test_code_fence_unwrapped(self):
        assert extract("```\nPlain summary text here.\n```") == "Plain summary text here."

    def test_emphasis_and_whitespace(self):
        assert extract("A **bold**   and *quiet*\n\n\n\nending.") == "A bold and quiet\n\nending."

    def test_never_empty_for_non_blank_input(self):
        assert extract("**Summary**") == "**Summary**"

    @pytest.mark.parametrize("raw", [None, "", "   \n "])
    def test_blank_input(self, raw):
        assert extract(raw) == ""

    @pytest.mark.parametrize(
        "raw",
        [
            f"{START_MARKER}\nHere is the text:\n## Key Points\n1. **One**\n2. Two\n{END_MARKER}",
            "Here's a summary:\n**Summary**\nStuff happened.\n\n\n**That's it**",
            "```markdown\n# Title\n\nBody with *emphasis*.\n```",
            "**Summary**",
        ],
    )
    def test_idempotent(self, raw):
        once = extract(raw)
        assert extract(once) == once


# ── Error classification tests ─────────────────────────────────────────

class TestErrorClassification:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (ValidationFailure("Either a URL or content is required."), ErrorCode.PROCESSING_ERROR),
            (UrlError("bad"), ErrorCode.URL_ERROR),
            (FetchError("bad"), ErrorCode.CONNECTION_ERROR),
            (ContentError("bad"), ErrorCode.CONTENT_ERROR),
            (CompletionError("bad"), ErrorCode.AI_SERVICE_ERROR),
        ],
    )
    def test_explicit_code_wins(self, exc, expected):
        assert classify_error(exc) is expected

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Invalid URL supplied", ErrorCode.URL_ERROR),
            ("Connection reset by peer", ErrorCode.CONNECTION_ERROR),
            ("Request timed out", ErrorCode.CONNECTION_ERROR),
            ("Page content is empty", ErrorCode.CONTENT_ERROR),
            ("OpenRouter quota exceeded", ErrorCode.AI_SERVICE_ERROR),
            ("something odd happened", ErrorCode.PROCESSING_ERROR),
            ("", ErrorCode.PROCESSING_ERROR),
        ],
    )
    def test_keyword_fallback(self, message, expected):
        assert classify_message(message) is expected
        assert classify_error(RuntimeError(message)) is expected

    def test_rate_limited(self):
        assert CompletionError("slow down", status_code=429).rate_limited
        assert CompletionError("Model is at capacity").rate_limited
        assert CompletionError("Too Many Requests").rate_limited
        assert not CompletionError("Bad request", status_code=400).rate_limited


# ── URL normalizer tests ───────────────────────────────────────────────

class TestUrlNormalizer:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("example.com/post", "https://example.com/post"),
            ("  http://example.com/a#frag ", "http://example.com/a"),
            ("https%3A%2F%2Fexample.com%2Fpath", "https://example.com/path"),
            ("rewrite.page/3/example.com/news", "https://example.com/news"),
            ("https://example.com/search?q=1", "https://example.com/search?q=1"),
            ("https://en.wikipedia.org/wiki/C%23", "https://en.wikipedia.org/wiki/C%23"),
            ("https://example.com/s?q=a%26b", "https://example.com/s?q=a%26b"),
            ("example.com/a%20b", "https://example.com/a%20b"),
            ("rewrite.page/2/https%3A%2F%2Fexample.com%2Fnews", "https://example.com/news"),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "ftp://example.com", "https://", "http://exa mple.com"])
    def test_rejects(self, raw):
        with pytest.raises(UrlError):
            normalize_url(raw)
