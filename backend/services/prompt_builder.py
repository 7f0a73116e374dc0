"""All prompt templates for Gemini API calls."""

from services.rewrite_selector import RewriteContext

MAX_JOB_CHARS = 6000
MAX_RESUME_CHARS = 14000

REWRITE_SYSTEM = (
    "You are an expert resume writer. You rewrite one resume bullet at a time. "
    "Never invent employers, tools, metrics or outcomes that the original does not support."
)

COVER_LETTER_SYSTEM = "\n".join([
    "You are an expert cover letter writer for tech roles.",
    "Write a cover letter that is ATS-friendly and truthful.",
    "Hard rules:",
    "- Do NOT invent employers, products, tools, metrics, outcomes, or titles.",
    "- Do NOT mention target company/product names unless explicitly provided.",
    "- If resume evidence is missing for a claim, do not include it.",
    "- Keep it specific and grounded in the provided bullets/resume text.",
    "- Avoid fluff, cliches, and overly grand claims.",
    "",
    "Style rules:",
    "- 3-5 short paragraphs.",
    "- Use clear impact language and ownership (Led/Owned/Drove/Tested/Implemented).",
    "- No bullet lists.",
])

TONE_SYSTEM = "You are a precise writing assistant."

LENGTH_GUIDES = {
    "short": "Aim ~150-220 words.",
    "standard": "Aim ~220-320 words.",
    "long": "Aim ~320-450 words.",
}


def clamp_text(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "…"


def build_rewrite_prompt(
    context: RewriteContext,
    job_text: str = "",
    keywords: list[str] | None = None,
    blocked_terms: list[str] | None = None,
    role: str | None = None,
    tone: str | None = None,
) -> str:
    """Prompt for one rewrite attempt.

    The retry attempt sees the previous rewrite and why it scored low.
    """
    keyword_line = ", ".join(keywords or []) or "(none)"
    blocked_line = ", ".join(blocked_terms or []) or "(none)"

    retry_section = ""
    if context.attempt > 1 and context.previous_attempt:
        why = ""
        if context.previous_strength and context.previous_strength.suggestion:
            why = f"\nIt scored low because: {context.previous_strength.suggestion}"
        retry_section = f"""
PREVIOUS ATTEMPT (weaker than the original, do better):
{context.previous_attempt}{why}
Start with a strong ownership verb (Led, Owned, Drove, Automated, Reduced) and
keep any outcome or metric from the original.
"""

    return f"""Rewrite this resume bullet for the target job.

ORIGINAL BULLET:
{context.original}
{retry_section}
TARGET ROLE: {role or "(not specified)"}
TONE: {tone or "confident, concise, impact-driven"}
KEYWORDS TO WORK IN (only where truthful): {keyword_line}
BLOCKED TERMS (must NOT appear): {blocked_line}

JOB POSTING (alignment only):
---
{clamp_text(job_text, MAX_JOB_CHARS)}
---

RULES:
- One bullet, one sentence, under 35 words.
- Format: Action verb + tool/scope + result.
- Preserve the original meaning; keep numbers exactly as given.
- No leading bullet character, no quotes, no commentary.

Respond with ONLY the rewritten bullet text."""


def build_cover_letter_prompt(
    job_text: str,
    bullets: list[str],
    resume_text: str = "",
    role_title: str = "",
    source_company: str = "",
    blocked_terms: list[str] | None = None,
    tone: str = "",
    length: str = "standard",
    include_salutation: bool = True,
    signature_name: str = "",
) -> str:
    """User prompt for a cover letter grounded in resume evidence."""
    blocks: list[str] = [f"ROLE TARGET: {role_title or '(infer from job posting)'}"]
    if source_company:
        blocks.append(f"PAST CONTEXT COMPANY: {source_company}")

    blocks += ["", "JOB POSTING (alignment only):", clamp_text(job_text, MAX_RESUME_CHARS)]

    if resume_text.strip():
        blocks += [
            "",
            "RESUME TEXT (ground truth; do not invent beyond this):",
            clamp_text(resume_text, MAX_RESUME_CHARS),
        ]

    blocks += ["", "EVIDENCE BULLETS (must ground claims in these):"]
    if bullets:
        blocks += [f"- {b}" for b in bullets]
    else:
        blocks.append("(none provided - keep generic and avoid specifics)")

    salutation = "Include 'Dear Hiring Manager,'" if include_salutation else "No salutation"
    blocks += [
        "",
        f"BLOCKED TERMS (must NOT appear unless already present in resume/bullets): "
        f"{', '.join(blocked_terms or []) or '(none)'}",
        "",
        f"TONE: {tone or 'confident, concise, impact-driven'}",
        f"LENGTH: {LENGTH_GUIDES.get(length, LENGTH_GUIDES['standard'])}",
        f"SALUTATION: {salutation}",
        "",
        "OUTPUT FORMAT:",
        "- Return ONLY the cover letter text.",
        "- No markdown. No quotes.",
        f"- End with a professional sign-off like 'Sincerely,' then "
        f"{signature_name or 'a [Your Name] placeholder'}.",
    ]
    return "\n".join(blocks)


def build_tone_prompt(job_text: str, company_url: str = "") -> str:
    """Prompt for a short cover letter tone string inferred from the posting."""
    return f"""You are helping choose a cover letter tone.

Input:
- Job posting text:
{clamp_text(job_text, MAX_JOB_CHARS)}

Optional company website (may be empty):
{company_url or "(none)"}

Task:
Return ONLY a short tone string (no quotes), 6-12 words max,
comma-separated adjectives, like:
confident, concise, friendly, collaborative, results-driven

Rules:
- Infer culture signals from the job posting language (serious vs playful, startup vs enterprise, etc.)
- Avoid buzzword soup.
- Keep it usable as a single "tone" field."""
