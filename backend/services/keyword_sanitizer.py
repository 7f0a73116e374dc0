"""Keep target-company and product names out of rewrite keywords."""

import logging
import re

logger = logging.getLogger(__name__)


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def sanitize_keywords(
    raw_keywords: list[str],
    target_company: str | None = None,
    target_products: list[str] | None = None,
    extra_blocked: list[str] | None = None,
) -> tuple[list[str], list[str]]:
    """Split keywords into (usable, blocked).

    A keyword is blocked when it contains a blocked term or is contained in
    one, so "monopoly" and "monopoly go" block each other. Both lists are
    deduplicated case-insensitively in input order.
    """
    blocked_terms = [
        _normalize(t)
        for t in [target_company or "", *(target_products or []), *(extra_blocked or [])]
        if _normalize(t)
    ]

    usable: list[str] = []
    blocked: list[str] = []
    seen_usable: set[str] = set()
    seen_blocked: set[str] = set()

    for keyword in raw_keywords or []:
        kw = (keyword or "").strip()
        if not kw:
            continue
        kw_norm = _normalize(kw)

        if any(term in kw_norm or kw_norm in term for term in blocked_terms):
            if kw_norm not in seen_blocked:
                blocked.append(kw)
                seen_blocked.add(kw_norm)
        elif kw_norm not in seen_usable:
            usable.append(kw)
            seen_usable.add(kw_norm)

    if blocked:
        logger.debug("Blocked %d keywords matching target terms", len(blocked))
    return usable, blocked
