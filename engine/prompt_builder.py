"""Prompt construction: canonical style to system and user instructions."""

from __future__ import annotations

from engine.style_resolver import DEFAULT_BULLET_COUNT, ResolvedStyle
from prompts.system_prompt import (
    BULLETS_PROMPT,
    CONTENT_USER_PROMPT,
    CUSTOM_STYLE_PROMPT,
    PRESET_PROMPTS,
    STRICT_OUTPUT_RULES,
    URL_USER_PROMPT,
)


def build_system_prompt(style: ResolvedStyle) -> str:
    """Return the system instruction for *style*, strict-output rules included."""
    if style.is_bullet_style:
        body = BULLETS_PROMPT.format(count=style.bullet_count or DEFAULT_BULLET_COUNT)
    elif style.style_id in PRESET_PROMPTS:
        body = PRESET_PROMPTS[style.style_id]
    else:
        body = CUSTOM_STYLE_PROMPT.format(style=style.style_id)
    return f"{body.strip()}\n{STRICT_OUTPUT_RULES}"


def _style_label(style: ResolvedStyle) -> str:
    if style.is_bullet_style:
        return f"{style.bullet_count or DEFAULT_BULLET_COUNT}-point bullets"
    return f'"{style.style_id}"'


def build_user_prompt(content: str, style: ResolvedStyle, *, source_url: str | None = None) -> str:
    """Wrap *content* in the user instruction; URL targets get the content-only warning."""
    if source_url:
        prompt = URL_USER_PROMPT.format(url=source_url, style_label=_style_label(style), content=content)
    else:
        prompt = CONTENT_USER_PROMPT.format(style_label=_style_label(style), content=content)
    return prompt.strip()
