"""Style resolution: free-form style tokens to canonical style ids.

Resolution order for a normalized token:

1. empty                          → ``standard``
2. pure digits ``N``              → ``bullets`` with N points
3. ``N-bullets`` / ``Npoints``…   → ``bullets`` with N points
4. alias table hit                → the alias' canonical id
5. anything else                  → the token itself, as a custom style

Alias lookup ignores hyphens and underscores so ``jerry-seinfeld``,
``jerry_seinfeld`` and ``jerryseinfeld`` resolve identically.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger("distill.engine.style")

DEFAULT_STYLE = "standard"
BULLET_STYLE = "bullets"
DEFAULT_BULLET_COUNT = 5

# ── Preset styles (id → display name, description) ────────────────────

PRESET_STYLES: dict[str, tuple[str, str]] = {
    "standard": ("Standard", "Concise, clear summary of key points"),
    "simple": ("Simple", "Easy-to-understand language with short sentences"),
    "bullets": ("Bullet Points", "Key points presented as a numbered list"),
    "eli5": ("Explain Like I'm 5", "Explains content as if to a five-year-old"),
    "concise": ("Concise", "Ultra-compact summary of essential points"),
    "tweet": ("Tweet", "Summary in 140 characters or less"),
}

# ── Alias table (compact spelling → canonical id) ─────────────────────

_ALIAS_GROUPS: dict[str, tuple[str, ...]] = {
    "standard": ("standard", "default", "normal", "summary", "summarize"),
    "simple": ("simple", "simplify", "simplified", "plainenglish"),
    "bullets": ("bullet", "bullets", "bulletpoint", "bulletpoints", "keypoints", "points"),
    "eli5": ("eli", "eli5", "explainlikeimfive", "explainlikeim5", "explainlikeiamfive"),
    "concise": ("concise", "brief", "short"),
    "tweet": ("tweet", "tweets", "twitter", "tweetsize"),
    "seinfeld-standup": ("seinfeld", "jerry", "jerryseinfeld", "seinfeldstandup"),
    "piratetalk": ("pirate", "pirates", "piratesp", "piratetalk", "piratespeak"),
    "clickbait": ("click", "clickbait", "clickbaity"),
}

STYLE_ALIASES: dict[str, str] = {
    alias: canonical for canonical, aliases in _ALIAS_GROUPS.items() for alias in aliases
}

# ── Normalization rules (applied in order) ────────────────────────────

_NORMALIZATION_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[^a-z0-9_\s-]"), ""),
    (re.compile(r"\s+"), "-"),
    (re.compile(r"-{2,}"), "-"),
    (re.compile(r"^-+|-+$"), ""),
]

_DIGITS = re.compile(r"^\d+$")
_COUNTED_BULLETS = re.compile(r"^(?P<count>\d+)-?(?:bullets?|points?|bulletpoints?|keypoints?)$")
_PATH_BULLETS = re.compile(r"^(?P<count>\d+)(?:/|$)")
_PATH_STYLE = re.compile(r"^(?P<style>[a-zA-Z0-9_-]+)(?:/|$)")


@dataclass(frozen=True)
class ResolvedStyle:
    style_id: str
    bullet_count: int | None = None
    is_custom: bool = False

    @property
    def is_bullet_style(self) -> bool:
        return self.style_id == BULLET_STYLE


@dataclass(frozen=True)
class PathTarget:
    style: ResolvedStyle
    target: str


def normalize_style(raw_style: str | None) -> str:
    """Lower-case, trim and reduce *raw_style* to ``[a-z0-9_-]`` with single hyphens."""
    token = (raw_style or "").lower().strip()
    for pattern, replacement in _NORMALIZATION_RULES:
        token = pattern.sub(replacement, token)
    return token


def _bullets(count: int | None) -> ResolvedStyle:
    if not count or count < 1:
        count = DEFAULT_BULLET_COUNT
    return ResolvedStyle(style_id=BULLET_STYLE, bullet_count=count)


def resolve(raw_style: str | None, explicit_bullet_count: int | None = None) -> ResolvedStyle:
    """Resolve a raw style token into a ``ResolvedStyle``.

    An explicit bullet count only applies when the token resolves to the
    bullets style; a count embedded in the token itself takes precedence.
    """
    token = normalize_style(raw_style)
    if not token:
        return ResolvedStyle(style_id=DEFAULT_STYLE)

    if _DIGITS.match(token):
        return _bullets(int(token))

    counted = _COUNTED_BULLETS.match(token)
    if counted:
        return _bullets(int(counted.group("count")))

    canonical = STYLE_ALIASES.get(token.replace("-", "").replace("_", ""), token)
    if canonical == BULLET_STYLE:
        return _bullets(explicit_bullet_count)

    is_custom = canonical not in PRESET_STYLES
    if is_custom:
        logger.debug("Style '%s' is not a preset; treating '%s' as a creative style", raw_style, canonical)
    return ResolvedStyle(style_id=canonical, is_custom=is_custom)


def parse_path(path: str) -> PathTarget:
    """Split a shortcut path like ``/eli5/example.com/post`` into style and target.

    A leading numeric segment is always a bullet count.  A leading
    ``[a-zA-Z0-9_-]+`` segment followed by ``/`` (or the end of the path) is
    a style.  Anything else leaves the whole path as the target with the
    standard style.
    """
    clean = (path or "").strip().strip("/")
    if not clean:
        return PathTarget(style=ResolvedStyle(style_id=DEFAULT_STYLE), target="")

    bullet_match = _PATH_BULLETS.match(clean)
    if bullet_match:
        return PathTarget(
            style=_bullets(int(bullet_match.group("count"))),
            target=clean[bullet_match.end():],
        )

    style_match = _PATH_STYLE.match(clean)
    if style_match:
        return PathTarget(
            style=resolve(style_match.group("style")),
            target=clean[style_match.end():],
        )

    return PathTarget(style=ResolvedStyle(style_id=DEFAULT_STYLE), target=clean)


def catalogue() -> tuple[list[tuple[str, str, str]], dict[str, str]]:
    """Return ``(presets, aliases)`` for the style catalogue endpoint."""
    presets = [(style_id, name, description) for style_id, (name, description) in PRESET_STYLES.items()]
    return presets, dict(STYLE_ALIASES)
