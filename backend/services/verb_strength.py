"""Rule-based rhetorical strength scoring for a single resume bullet."""

import re
from typing import Literal

from models.responses import VerbStrength, VerbStrengthLabel

BASELINE = 62
REWRITE_BONUS = 6
OPENER_WORDS = 10
VERB_SCAN_WORDS = 8

WEAK_OPENER_PENALTY = 10
PASSIVE_PENALTY = 8
VAGUE_PENALTY = 6
NO_VERB_PENALTY = 4
STRONG_VERB_BONUS = 22
SOLID_VERB_BONUS = 10
GENERIC_VERB_BONUS = 6
OUTCOME_BONUS = 12
METRIC_BONUS = 12
SCOPE_BONUS = 10

WEAK_OPENERS: tuple[str, ...] = (
    "worked with", "worked on", "helped", "assisted", "supported",
    "participated in", "involved in", "exposed to", "responsible for",
    "collaborated with", "was responsible for", "was involved in",
    "was tasked with", "was part of",
)

STRONG_VERBS: frozenset[str] = frozenset({
    "led", "owned", "drove", "delivered", "shipped", "launched", "spearheaded",
    "directed", "managed", "mentored", "architected", "designed", "implemented",
    "automated", "optimized", "improved", "increased", "reduced", "cut", "saved",
    "prevented", "unblocked", "eliminated", "de-risked", "hardened",
})

SOLID_VERBS: frozenset[str] = frozenset({
    "tested", "validated", "executed", "created", "built", "documented",
    "triaged", "investigated", "debugged", "monitored", "coordinated",
    "refactored", "integrated", "migrated", "standardized", "streamlined",
    "analyzed", "measured", "instrumented",
})

# Past-tense words that read as weak ownership, never credited as verbs
WEAK_VERBS: frozenset[str] = frozenset({
    "worked", "helped", "assisted", "supported", "participated", "involved",
    "exposed", "collaborated", "tasked", "assigned",
})

FILLER: frozenset[str] = frozenset({
    "successfully", "effectively", "proactively", "actively", "efficiently",
    "responsible", "was", "for", "the", "a", "an", "to", "and", "with", "in",
    "on", "of", "by", "as", "at",
})

_LEADING_MARKERS_RE = re.compile(r"^(?:[\s•·*‣∙–—\-]|o(?=\s))+")
_CURLY_QUOTES_RE = re.compile(r"[“”‘’]")
_TOKEN_CLEAN_RE = re.compile(r"[^\w-]")
_GENERIC_ED_RE = re.compile(r"^[a-z][a-z-]*ed$")

_PASSIVE_RE = re.compile(
    r"\b(?:was responsible for|was involved in|was tasked with|was assigned to|was part of)\b",
    re.IGNORECASE,
)
_VAGUE_RE = re.compile(
    r"\b(?:various|several|some|things|stuff|etc|multiple tasks|as needed)\b", re.IGNORECASE
)
_OUTCOME_RE = re.compile(
    r"\b(?:increas(?:e|es|ed|ing)|reduc(?:e|es|ed|ing)|improv(?:e|es|ed|ing)|cut(?:s|ting)?|"
    r"sav(?:e|es|ed|ing)|prevent(?:s|ed|ing)?|boost(?:s|ed|ing)?|gr(?:ew|ow|ows|owing)|"
    r"decreas(?:e|es|ed|ing)|accelerat(?:e|es|ed|ing)|shorten(?:s|ed|ing)?|"
    r"eliminat(?:e|es|ed|ing)|de-risk(?:s|ed|ing)?)\b",
    re.IGNORECASE,
)
_METRIC_RE = re.compile(
    r"%|\$\s?\d|\b\d+(?:\.\d+)?\s?(?:ms|s|sec|secs|minutes|min|hrs|hours|days|weeks)\b"
    r"|\b\d+(?:\.\d+)?x\b|\b\d{2,}\b",
    re.IGNORECASE,
)
_SCOPE_RE = re.compile(
    r"\b(?:api|apis|pipeline|pipelines|ci/cd|release|deployment|automation|framework|"
    r"test plan|test strategy|coverage|regression|observability|monitoring|dashboards|"
    r"kpi|experiment|a/b|tracking|instrumentation|backend|frontend|mobile|testrail|"
    r"jira|confluence|postman)\b",
    re.IGNORECASE,
)


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def label_for(score: int) -> VerbStrengthLabel:
    if score < 50:
        return "Weak"
    if score < 80:
        return "OK"
    return "Strong"


def _clean_bullet(bullet: str) -> str:
    text = _CURLY_QUOTES_RE.sub("", (bullet or "").strip())
    return _LEADING_MARKERS_RE.sub("", text).lower().strip()


def detect_verb(words: list[str]) -> tuple[str | None, str | None]:
    """Return (verb, tier) for the first recognizable action verb."""
    for raw in words[:VERB_SCAN_WORDS]:
        word = _TOKEN_CLEAN_RE.sub("", raw)
        if not word or word in FILLER:
            continue
        if word in STRONG_VERBS:
            return word, "strong"
        if word in SOLID_VERBS:
            return word, "solid"
        if len(word) >= 5 and word not in WEAK_VERBS and _GENERIC_ED_RE.match(word):
            return word, "generic"
    return None, None


def compute_verb_strength(
    bullet: str, mode: Literal["before", "after"] = "before"
) -> VerbStrength:
    """Score a bullet's opener, ownership and impact signals on 0-100.

    ``after`` mode adds a small bonus for rewritten text. The bonus never
    affects ``base_score``, which is what regression checks compare.
    """
    raw = (bullet or "").strip()
    cleaned = _clean_bullet(raw)
    words = cleaned.split()
    opener = " ".join(words[:OPENER_WORDS])

    reasons: list[str] = []
    score = BASELINE

    weak = next((p for p in WEAK_OPENERS if opener.startswith(p)), None)
    if weak:
        score -= WEAK_OPENER_PENALTY
        reasons.append(f'Weak opener ("{weak}")')

    if _PASSIVE_RE.search(opener):
        score -= PASSIVE_PENALTY
        reasons.append("Passive/indirect ownership")

    if _VAGUE_RE.search(raw):
        score -= VAGUE_PENALTY
        reasons.append("Vague wording")

    verb, tier = detect_verb(words)
    if tier == "strong":
        score += STRONG_VERB_BONUS
        reasons.append(f'Strong verb ("{verb}")')
    elif tier == "solid":
        score += SOLID_VERB_BONUS
        reasons.append(f'Solid verb ("{verb}")')
    elif tier == "generic":
        score += GENERIC_VERB_BONUS
        reasons.append(f'Action verb ("{verb}")')
    else:
        score -= NO_VERB_PENALTY
        reasons.append("No clear action verb early")

    if _OUTCOME_RE.search(raw):
        score += OUTCOME_BONUS
        reasons.append("Outcome language")

    if _METRIC_RE.search(raw):
        score += METRIC_BONUS
        reasons.append("Quantified impact")

    if _SCOPE_RE.search(raw):
        score += SCOPE_BONUS
        reasons.append("Clear scope/system")

    base_score = clamp(score)
    bonus = REWRITE_BONUS if mode == "after" else 0
    final = clamp(base_score + bonus)
    label = label_for(final)

    suggestion = None
    if label != "Strong":
        suggestion = (
            f"Why: {', '.join(reasons[:3])}"
            if reasons
            else "Try a stronger opener and add outcome/metrics if truthful."
        )

    return VerbStrength(
        score=final,
        label=label,
        detected_verb=verb,
        suggestion=suggestion,
        base_score=base_score,
        rewrite_bonus_applied=bonus,
        reasons=reasons,
    )
