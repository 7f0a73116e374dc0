from typing import Literal

from pydantic import BaseModel, Field


class QuickAnalyzeRequest(BaseModel):
    resume_text: str = Field(..., max_length=50000, description="Plain text resume content")
    job_description: str = Field(..., max_length=20000, description="Job description text")
    only_experience_bullets: bool = True


class KeywordFitRequest(BaseModel):
    resume_text: str = Field("", max_length=50000)
    job_description: str = Field("", max_length=20000)


class ExtractBulletsRequest(BaseModel):
    resume_text: str = Field(..., max_length=50000)


class VerbStrengthRequest(BaseModel):
    bullet: str = Field(..., max_length=800)
    mode: Literal["before", "after"] = "before"


class RewriteBulletRequest(BaseModel):
    original_bullet: str = Field(..., max_length=800)
    job_description: str = Field("", max_length=20000)
    suggested_keywords: list[str] = Field(default_factory=list, max_length=40)
    role: str | None = Field(None, max_length=120)
    tone: str | None = Field(None, max_length=120)
    target_company: str | None = Field(None, max_length=120)
    target_products: list[str] = Field(default_factory=list, max_length=25)
    blocked_terms: list[str] = Field(default_factory=list, max_length=50)


class CoverLetterRequest(BaseModel):
    job_description: str = Field(..., max_length=20000)
    resume_text: str = Field("", max_length=50000)
    bullets: list[str] = Field(default_factory=list, max_length=220)
    rewrite_plan_bullets: list[str] = Field(default_factory=list, max_length=220)
    source_company: str = Field("", max_length=120)
    target_company: str = Field("", max_length=120)
    target_products: list[str] = Field(default_factory=list, max_length=25)
    blocked_terms: list[str] = Field(default_factory=list, max_length=50)
    role_title: str = Field("", max_length=120)
    tone: str = Field("", max_length=120)
    length: Literal["short", "standard", "long"] = "standard"
    include_salutation: bool = True
    signature_name: str = Field("", max_length=120)


class ToneRequest(BaseModel):
    job_description: str = Field(..., max_length=20000)
    company_url: str = Field("", max_length=500)
