"""Per-bullet keyword suggestions and the rewrite plan built from them."""

import re

from models.responses import BulletSuggestion, ResumeBullet, RewritePlanItem, WeakBullet

MAX_SUGGESTED_KEYWORDS = 5
WEAK_OVERLAP_THRESHOLD = 0.12
MAX_WEAK_BULLETS = 8
MAX_PLAN_ITEMS = 8
MAX_TARGET_KEYWORDS = 3

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", _NON_WORD_RE.sub(" ", (text or "").lower())).strip()


def token_set(text: str) -> set[str]:
    normalized = _normalize(text)
    if not normalized:
        return set()
    return {t for t in normalized.split(" ") if len(t) >= 3}


def overlap_score(a: set[str], b: set[str]) -> float:
    """Shared tokens over the size of the larger set."""
    if not a or not b:
        return 0.0
    return len(a & b) / max(len(a), len(b))


def suggest_keywords_for_bullets(
    bullets: list[ResumeBullet],
    job_text: str,
    missing_keywords: list[str],
) -> tuple[list[BulletSuggestion], list[WeakBullet]]:
    """Match missing job keywords to the bullets they fit best.

    Returns (suggestions for every bullet, bullets with little job overlap).
    """
    job_tokens = token_set(job_text)
    keyword_tokens = [(kw, token_set(kw)) for kw in missing_keywords]

    suggestions: list[BulletSuggestion] = []
    for bullet in bullets:
        bullet_tokens = token_set(bullet.text)
        ranked = [
            (kw, overlap_score(tokens, bullet_tokens)) for kw, tokens in keyword_tokens
        ]
        ranked = sorted((r for r in ranked if r[1] > 0), key=lambda r: r[1], reverse=True)
        suggestions.append(BulletSuggestion(
            bullet_id=bullet.id,
            bullet_text=bullet.text,
            suggested_keywords=[kw for kw, _ in ranked[:MAX_SUGGESTED_KEYWORDS]],
            bullet_job_overlap=overlap_score(bullet_tokens, job_tokens),
        ))

    weak = sorted(
        (s for s in suggestions if s.bullet_job_overlap < WEAK_OVERLAP_THRESHOLD),
        key=lambda s: s.bullet_job_overlap,
    )
    weak_bullets = [
        WeakBullet(bullet_id=s.bullet_id, bullet_text=s.bullet_text, overlap=s.bullet_job_overlap)
        for s in weak[:MAX_WEAK_BULLETS]
    ]
    return suggestions, weak_bullets


def build_rewrite_plan(
    suggestions: list[BulletSuggestion],
    job_ids: dict[str, str] | None = None,
    max_items: int = MAX_PLAN_ITEMS,
) -> list[RewritePlanItem]:
    """Pick the bullets with the most keyword opportunities to rewrite first."""
    job_ids = job_ids or {}
    candidates = [s for s in suggestions if s.suggested_keywords]
    candidates = sorted(
        candidates,
        key=lambda s: len(s.suggested_keywords) * 2 + s.bullet_job_overlap,
        reverse=True,
    )[:max_items]

    plan = []
    for s in candidates:
        targets = s.suggested_keywords[:MAX_TARGET_KEYWORDS]
        plan.append(RewritePlanItem(
            bullet_id=s.bullet_id,
            original_bullet=s.bullet_text,
            target_keywords=targets,
            suggestion_text=(
                f"Add: {', '.join(targets)}. "
                'Rewrite in "Action + Tool/Scope + Result" format (metrics if possible). '
                'Example: "Validated <scope> using <tool> to ensure <quality outcome>, reducing <risk>."'
            ),
            job_id=job_ids.get(s.bullet_id, "job_default"),
        ))
    return plan
