from typing import Literal

from pydantic import BaseModel

VerbStrengthLabel = Literal["Weak", "OK", "Strong"]


class KeywordFitReport(BaseModel):
    match_score: int = 0
    keywords_from_job: list[str] = []
    keywords_found_in_resume: list[str] = []
    missing_keywords: list[str] = []
    high_impact_missing: list[str] = []


class ExtractedJob(BaseModel):
    id: str
    company: str = "Company"
    title: str = "Role"
    dates: str = ""
    location: str = ""
    bullets: list[str] = []


class ExtractionResponse(BaseModel):
    bullets: list[str] = []
    jobs: list[ExtractedJob] = []


class VerbStrength(BaseModel):
    score: int
    label: VerbStrengthLabel
    detected_verb: str | None = None
    suggestion: str | None = None
    base_score: int
    rewrite_bonus_applied: int = 0
    reasons: list[str] = []


class ResumeBullet(BaseModel):
    id: str
    text: str
    job_id: str = "job_default"


class BulletSuggestion(BaseModel):
    bullet_id: str
    bullet_text: str
    suggested_keywords: list[str] = []
    bullet_job_overlap: float = 0.0


class WeakBullet(BaseModel):
    bullet_id: str
    bullet_text: str
    overlap: float = 0.0


class RewritePlanItem(BaseModel):
    bullet_id: str = ""
    original_bullet: str
    target_keywords: list[str] = []
    suggestion_text: str = ""
    job_id: str = "job_default"
    verb_strength: VerbStrength | None = None


class MetaBlocks(BaseModel):
    games_shipped: list[str] = []
    metrics: list[str] = []


class AnalysisDebug(BaseModel):
    resume_len: int = 0
    job_len: int = 0
    only_experience_bullets_used: bool = True
    experience_len: int = 0
    found_experience_section: bool = False
    experience_mode: str = "none"
    bullets_from_file_count: int = 0
    bullet_source: str = "none"
    jobs_detected: int = 0
    flattened_bullet_count: int = 0
    rewrite_plan_count: int = 0
    meta_games_count: int = 0
    meta_metrics_count: int = 0


class AnalysisResponse(KeywordFitReport):
    experience_jobs: list[ExtractedJob] = []
    bullets: list[str] = []
    bullet_job_ids: list[str] = []
    bullet_suggestions: list[BulletSuggestion] = []
    weak_bullets: list[WeakBullet] = []
    rewrite_plan: list[RewritePlanItem] = []
    meta_blocks: MetaBlocks = MetaBlocks()
    debug: AnalysisDebug = AnalysisDebug()


class RewriteResult(BaseModel):
    rewritten_bullet: str
    verb_strength_before: VerbStrength
    verb_strength_after: VerbStrength
    retry_used: bool = False
    used_original_fallback: bool = False
    regressed: bool = False
    blocked_keywords: list[str] = []


class CoverLetterResponse(BaseModel):
    cover_letter: str
    bullets_used: int = 0
    length: str = "standard"


class ToneResponse(BaseModel):
    tone: str
