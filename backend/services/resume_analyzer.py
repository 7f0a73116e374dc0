"""Orchestrator: resume tailoring analysis and generation flows.

Analysis pipeline:
1. Keyword fit of the resume against ranked job-posting terms
2. Experience section slicing
3. Strict job/bullet extraction (slice, then whole source text)
4. Fallbacks: DOCX list bullets, then looser bullet strategies
5. Keyword suggestions per bullet and a rewrite plan
6. Verb strength ("before") for every plan item
7. Meta blocks (games shipped, metric lines) from the whole resume

Generation flows (Gemini-backed): bullet rewrite with best-of-two
selection, cover letter, tone recommendation.
"""

import logging
import re

from models.requests import CoverLetterRequest, RewriteBulletRequest, ToneRequest
from models.responses import (
    AnalysisDebug,
    AnalysisResponse,
    CoverLetterResponse,
    ExtractedJob,
    ResumeBullet,
    RewritePlanItem,
    RewriteResult,
)
from services import gemini_client, prompt_builder
from services.bullet_extractor import (
    DEFAULT_JOB_ID,
    clean_line,
    extract_bullets_and_jobs,
    extract_experience_section,
    extract_meta_blocks,
    fallback_bullets,
    normalize_resume_text,
)
from services.bullet_suggestions import build_rewrite_plan, suggest_keywords_for_bullets
from services.keyword_extractor import analyze_keyword_fit
from services.keyword_sanitizer import sanitize_keywords
from services.rewrite_selector import RewriteContext, select_best_rewrite
from services.verb_strength import compute_verb_strength

logger = logging.getLogger(__name__)

SEED_PLAN_KEYWORDS = 5
COVER_LETTER_BULLETS = 6
# The retry gets a little more freedom than the first attempt
REWRITE_TEMPERATURES = {1: 0.4, 2: 0.6}

_HTML_MARKERS = ("<!DOCTYPE html>", 'id="__NEXT_DATA__"', "<html")


def _flatten_jobs(jobs: list[ExtractedJob]) -> tuple[list[str], list[str]]:
    bullets: list[str] = []
    job_ids: list[str] = []
    for job in jobs:
        for bullet in job.bullets:
            text = bullet.strip()
            if text:
                bullets.append(text)
                job_ids.append(job.id)
    return bullets, job_ids


def _collect_bullets(
    slice_text: str, source_text: str, file_bullets: list[str]
) -> tuple[list[ExtractedJob], list[str], list[str], str]:
    """Run extraction strategies in order until one yields bullets.

    Returns (jobs, bullets, bullet_job_ids, source label).
    """
    strict = extract_bullets_and_jobs(slice_text)
    jobs = strict.jobs
    bullets, job_ids = _flatten_jobs(jobs)
    if bullets:
        return jobs, bullets, job_ids, "experience_section"

    fallback_job_id = jobs[0].id if jobs else DEFAULT_JOB_ID

    second = extract_bullets_and_jobs(source_text)
    bullets, job_ids = _flatten_jobs(second.jobs)
    if bullets:
        return second.jobs, bullets, job_ids, "source_text"
    if second.bullets:
        return jobs, second.bullets, [fallback_job_id] * len(second.bullets), "source_text_flat"

    file_bullets = [b.strip() for b in file_bullets if b and b.strip()]
    if file_bullets:
        return jobs, file_bullets, [fallback_job_id] * len(file_bullets), "file_list_items"

    loose, strategy = fallback_bullets(source_text)
    return jobs, loose, [fallback_job_id] * len(loose), f"fallback:{strategy}"


def analyze(
    resume_text: str,
    job_description: str,
    only_experience_bullets: bool = True,
    file_bullets: list[str] | None = None,
) -> AnalysisResponse:
    """Run the full tailoring analysis. Degrades to empty results, never raises."""
    resume = normalize_resume_text(resume_text)
    job_text = clean_line(job_description)

    fit = analyze_keyword_fit(resume, job_text)

    experience = extract_experience_section(resume)
    source_text = experience.experience_text if only_experience_bullets else resume
    jobs, bullets, job_ids, bullet_source = _collect_bullets(
        experience.experience_text, source_text, file_bullets or []
    )
    if not bullets:
        logger.warning("No bullets detected (experience mode=%s)", experience.mode)

    resume_bullets = [
        ResumeBullet(id=f"b{i + 1}", text=text, job_id=job_id)
        for i, (text, job_id) in enumerate(zip(bullets, job_ids))
    ]
    job_by_bullet = {b.id: b.job_id for b in resume_bullets}

    suggestions, weak_bullets = suggest_keywords_for_bullets(
        resume_bullets, job_text, fit.missing_keywords
    )
    plan = build_rewrite_plan(suggestions, job_ids=job_by_bullet)

    if not plan:
        seed = (fit.high_impact_missing or fit.missing_keywords)[:SEED_PLAN_KEYWORDS]
        plan = [
            RewritePlanItem(
                bullet_id=b.id, original_bullet=b.text, target_keywords=seed, job_id=b.job_id
            )
            for b in resume_bullets
        ]

    plan = [
        item.model_copy(update={"verb_strength": compute_verb_strength(item.original_bullet)})
        for item in plan
    ]

    meta = extract_meta_blocks(resume)

    return AnalysisResponse(
        **fit.model_dump(),
        experience_jobs=jobs,
        bullets=bullets,
        bullet_job_ids=job_ids,
        bullet_suggestions=suggestions,
        weak_bullets=weak_bullets,
        rewrite_plan=plan,
        meta_blocks=meta,
        debug=AnalysisDebug(
            resume_len=len(resume),
            job_len=len(job_text),
            only_experience_bullets_used=only_experience_bullets,
            experience_len=len(experience.experience_text),
            found_experience_section=experience.found_section,
            experience_mode=experience.mode,
            bullets_from_file_count=len(file_bullets or []),
            bullet_source=bullet_source,
            jobs_detected=len(jobs),
            flattened_bullet_count=len(bullets),
            rewrite_plan_count=len(plan),
            meta_games_count=len(meta.games_shipped),
            meta_metrics_count=len(meta.metrics),
        ),
    )


def _blocked_terms(target_company: str | None, products: list[str], extra: list[str]) -> list[str]:
    terms = [target_company or "", *products, *extra]
    return [t.strip() for t in terms if t and t.strip()]


async def rewrite_bullet(request: RewriteBulletRequest) -> RewriteResult:
    """Rewrite one bullet with Gemini, keeping the original if quality drops."""
    usable, blocked = sanitize_keywords(
        request.suggested_keywords,
        target_company=request.target_company,
        target_products=request.target_products,
        extra_blocked=request.blocked_terms,
    )
    blocked_terms = _blocked_terms(
        request.target_company, request.target_products, request.blocked_terms
    )
    job_text = clean_line(request.job_description)

    async def generate(context: RewriteContext) -> str | None:
        prompt = prompt_builder.build_rewrite_prompt(
            context,
            job_text=job_text,
            keywords=usable,
            blocked_terms=blocked_terms,
            role=request.role,
            tone=request.tone,
        )
        return await gemini_client.generate_text(
            prompt,
            system_instruction=prompt_builder.REWRITE_SYSTEM,
            temperature=REWRITE_TEMPERATURES.get(context.attempt),
            max_output_tokens=256,
        )

    result = await select_best_rewrite(request.original_bullet, generate)
    return result.model_copy(update={"blocked_keywords": blocked})


def pick_cover_letter_bullets(
    plan_bullets: list[str], bullets: list[str], limit: int = COVER_LETTER_BULLETS
) -> list[str]:
    """Plan bullets first (more aligned), then the rest, deduplicated."""
    picked: list[str] = []
    seen: set[str] = set()
    for bullet in [*plan_bullets, *bullets]:
        text = (bullet or "").strip()
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        picked.append(text)
        if len(picked) >= limit:
            break
    return picked


def looks_like_html(text: str) -> bool:
    return any(marker in text for marker in _HTML_MARKERS)


async def generate_cover_letter(request: CoverLetterRequest) -> CoverLetterResponse | None:
    """Generate a grounded cover letter; None when the model output is unusable."""
    bullets = pick_cover_letter_bullets(request.rewrite_plan_bullets, request.bullets)
    prompt = prompt_builder.build_cover_letter_prompt(
        job_text=request.job_description.strip(),
        bullets=bullets,
        resume_text=request.resume_text,
        role_title=request.role_title.strip(),
        source_company=request.source_company.strip(),
        blocked_terms=_blocked_terms(
            request.target_company, request.target_products, request.blocked_terms
        ),
        tone=request.tone.strip(),
        length=request.length,
        include_salutation=request.include_salutation,
        signature_name=request.signature_name.strip(),
    )
    text = await gemini_client.generate_text(
        prompt,
        system_instruction=prompt_builder.COVER_LETTER_SYSTEM,
        temperature=0.35,
        max_output_tokens=2048,
    )
    if not text:
        return None
    if looks_like_html(text):
        logger.error("Cover letter generation returned HTML-like output")
        return None
    return CoverLetterResponse(cover_letter=text, bullets_used=len(bullets), length=request.length)


async def recommend_tone(request: ToneRequest) -> str | None:
    """Infer a short comma-separated tone string from the job posting."""
    prompt = prompt_builder.build_tone_prompt(
        request.job_description.strip(), request.company_url.strip()
    )
    tone = await gemini_client.generate_text(
        prompt, system_instruction=prompt_builder.TONE_SYSTEM, temperature=0.3, max_output_tokens=64
    )
    if not tone:
        return None
    return re.sub(r"\s+", " ", tone).strip().strip("\"'")
