"""Best-of-two bullet rewrite selection with a no-regression floor.

The original bullet is scored in ``before`` mode and each generated
candidate in ``after`` mode. A second attempt is requested only when the
first one scores below the original. The final bullet never has a lower
``base_score`` than the original; if every candidate does, the original
is returned.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from models.responses import RewriteResult, VerbStrength
from services.verb_strength import compute_verb_strength

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2

_WRAPPING_QUOTES = "\"'“”‘’`"
_LEADING_MARKER_RE = re.compile(r"^(?:[•·*‣∙–—-]\s*)+")


@dataclass(frozen=True)
class RewriteContext:
    """What the generator gets to see for one attempt."""
    original: str
    attempt: int
    previous_attempt: str | None = None
    previous_strength: VerbStrength | None = None


@dataclass(frozen=True)
class RewriteCandidate:
    text: str
    verb_strength: VerbStrength
    attempt: int


GenerateCandidate = Callable[[RewriteContext], Awaitable[str | None]]


def clean_candidate(text: str | None) -> str:
    """Trim whitespace, wrapping quotes and a leading bullet marker."""
    cleaned = (text or "").strip().strip(_WRAPPING_QUOTES).strip()
    cleaned = _LEADING_MARKER_RE.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def pick_best(candidates: list[RewriteCandidate]) -> RewriteCandidate | None:
    """Highest base score, then highest total score, then earliest attempt."""
    if not candidates:
        return None
    return max(
        candidates,
        key=lambda c: (c.verb_strength.base_score, c.verb_strength.score, -c.attempt),
    )


async def _generate(generate: GenerateCandidate, context: RewriteContext) -> RewriteCandidate | None:
    try:
        raw = await generate(context)
    except Exception as e:
        logger.warning("Rewrite attempt %d failed: %s", context.attempt, e)
        return None

    text = clean_candidate(raw)
    if not text:
        logger.warning("Rewrite attempt %d returned empty text", context.attempt)
        return None
    return RewriteCandidate(
        text=text,
        verb_strength=compute_verb_strength(text, mode="after"),
        attempt=context.attempt,
    )


async def select_best_rewrite(original: str, generate: GenerateCandidate) -> RewriteResult:
    """Generate up to two rewrites and keep the best one that does not regress."""
    original = (original or "").strip()
    if not original:
        raise ValueError("original bullet is required")

    before = compute_verb_strength(original, mode="before")
    candidates: list[RewriteCandidate] = []

    first = await _generate(generate, RewriteContext(original=original, attempt=1))
    if first is not None:
        candidates.append(first)

    retry_used = first is None or first.verb_strength.base_score < before.base_score
    if retry_used:
        second = await _generate(
            generate,
            RewriteContext(
                original=original,
                attempt=MAX_ATTEMPTS,
                previous_attempt=first.text if first else None,
                previous_strength=first.verb_strength if first else None,
            ),
        )
        if second is not None:
            candidates.append(second)

    best = pick_best(candidates)
    regressed = best is not None and best.verb_strength.base_score < before.base_score

    if best is None or regressed:
        logger.info(
            "Keeping original bullet (candidates=%d, regressed=%s)", len(candidates), regressed
        )
        return RewriteResult(
            rewritten_bullet=original,
            verb_strength_before=before,
            verb_strength_after=compute_verb_strength(original, mode="before"),
            retry_used=retry_used,
            used_original_fallback=True,
            regressed=regressed,
        )

    return RewriteResult(
        rewritten_bullet=best.text,
        verb_strength_before=before,
        verb_strength_after=best.verb_strength,
        retry_used=retry_used,
        used_original_fallback=False,
        regressed=False,
    )
