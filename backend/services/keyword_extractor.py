"""Keyword extraction and matching for resume-JD analysis.

Builds weighted 1-3 word n-grams from the job posting, boosts tool names
and terms from the requirements area, removes n-grams that are covered by
a higher-ranked phrase, then checks each ranked term against the resume.
"""

import logging
import math
import re
from dataclasses import dataclass

from models.responses import KeywordFitReport
from services.text_normalizer import is_useful_token, normalize, tokenize

logger = logging.getLogger(__name__)

# N-gram size -> weight. Multi-word terms are usually real skills.
NGRAM_WEIGHTS: dict[int, float] = {1: 1.0, 2: 2.2, 3: 3.2}

TOOL_BOOST = 1.4
REQUIREMENTS_BOOST = 1.2
MAX_TERMS = 40
HIGH_IMPACT_LIMIT = 10

_TOOL_RE = re.compile(
    r"(jira|confluence|postman|playwright|selenium|cypress|jenkins|github|aws|gcp|azure)",
    re.IGNORECASE,
)
_REQUIREMENTS_MARKER = "require"


@dataclass(frozen=True)
class Term:
    """A ranked job-posting n-gram."""
    term: str
    score: float

    @property
    def parts(self) -> list[str]:
        return self.term.split(" ")


def _build_ngrams(tokens: list[str], n: int) -> list[str]:
    return [" ".join(tokens[i:i + n]) for i in range(len(tokens) - n + 1)]


def _requirements_tail(job_text: str) -> str | None:
    """Lowercased job text from the first 'require' onwards, if present."""
    lower = job_text.lower()
    idx = lower.find(_REQUIREMENTS_MARKER)
    if idx == -1:
        return None
    return lower[idx:]


def _dedupe_ranked(scored: list[Term], limit: int = MAX_TERMS) -> list[Term]:
    """Drop unigrams already covered by a selected multi-word term."""
    selected: list[Term] = []
    blocked: set[str] = set()

    for item in scored:
        if len(selected) >= limit:
            break
        parts = item.parts
        if len(parts) == 1 and item.term in blocked:
            continue

        selected.append(item)
        if len(parts) >= 2:
            blocked.update(parts)
            for i in range(len(parts) - 1):
                blocked.add(f"{parts[i]} {parts[i + 1]}")

    return selected


def score_terms(job_text: str) -> list[Term]:
    """Rank job-posting n-grams by frequency, n-gram weight and boosts."""
    base_tokens = [t for t in tokenize(job_text) if is_useful_token(t)]

    counts: dict[str, int] = {}
    weights: dict[str, float] = {}
    for n, weight in NGRAM_WEIGHTS.items():
        grams = base_tokens if n == 1 else _build_ngrams(base_tokens, n)
        for gram in grams:
            if not gram:
                continue
            # Aliases can expand a token into a phrase containing stopwords
            if not all(is_useful_token(p) for p in gram.split(" ")):
                continue
            counts[gram] = counts.get(gram, 0) + 1
            weights[gram] = max(weights.get(gram, 0.0), weight)

    tail = _requirements_tail(job_text)
    scored: list[Term] = []
    for term, freq in counts.items():
        score = freq * weights.get(term, 1.0)
        if _TOOL_RE.search(term):
            score *= TOOL_BOOST
        if tail is not None and term in tail:
            score *= REQUIREMENTS_BOOST
        scored.append(Term(term=term, score=score))

    # sorted() is stable, so equal scores keep first-seen order
    scored = sorted(scored, key=lambda t: t.score, reverse=True)
    return _dedupe_ranked(scored)


def term_present(resume_norm: str, term: str) -> bool:
    """Substring match for phrases, word-boundary match for single words."""
    if " " in term:
        return term in resume_norm
    return re.search(rf"\b{re.escape(term)}\b", resume_norm, re.IGNORECASE) is not None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def analyze_keyword_fit(resume_text: str, job_text: str) -> KeywordFitReport:
    """Compare ranked job keywords against the resume."""
    job_keywords = score_terms(job_text)
    resume_norm = normalize(resume_text)

    found: list[Term] = []
    missing: list[Term] = []
    found_score = 0.0
    total_score = 0.0

    for kw in job_keywords:
        total_score += kw.score
        if term_present(resume_norm, kw.term):
            found.append(kw)
            found_score += kw.score
        else:
            missing.append(kw)

    match_score = 0 if total_score == 0 else _round_half_up(found_score / total_score * 100)
    logger.debug(
        "Keyword fit: %d terms, %d found, score %d",
        len(job_keywords), len(found), match_score,
    )

    return KeywordFitReport(
        match_score=match_score,
        keywords_from_job=[k.term for k in job_keywords],
        keywords_found_in_resume=[k.term for k in found],
        missing_keywords=[k.term for k in missing],
        high_impact_missing=[k.term for k in missing[:HIGH_IMPACT_LIMIT]],
    )
