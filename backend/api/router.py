import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from config import settings
from models.requests import (
    CoverLetterRequest,
    ExtractBulletsRequest,
    KeywordFitRequest,
    QuickAnalyzeRequest,
    RewriteBulletRequest,
    ToneRequest,
    VerbStrengthRequest,
)
from models.responses import (
    AnalysisResponse,
    CoverLetterResponse,
    ExtractionResponse,
    KeywordFitReport,
    RewriteResult,
    ToneResponse,
    VerbStrength,
)
from services import gemini_client, pdf_parser, resume_analyzer
from services.bullet_extractor import extract_bullets_and_jobs, normalize_resume_text
from services.keyword_extractor import analyze_keyword_fit
from services.verb_strength import compute_verb_strength

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_gemini() -> None:
    if not gemini_client.is_configured():
        raise HTTPException(status_code=503, detail="Gemini is not configured (GEMINI_API_KEY)")


def _validate_analysis_input(resume_text: str, job_description: str) -> None:
    if len(normalize_resume_text(resume_text)) < settings.min_resume_chars:
        raise HTTPException(
            status_code=400,
            detail="Resume text is too short. Paste more of the resume or upload a file.",
        )
    if not job_description.strip():
        raise HTTPException(status_code=400, detail="Missing job description")
    if len(job_description) > settings.max_job_chars:
        raise HTTPException(
            status_code=400,
            detail=f"Job description too long (max {settings.max_job_chars} chars)",
        )


def _run_analysis(
    resume_text: str,
    job_description: str,
    only_experience_bullets: bool,
    file_bullets: list[str] | None = None,
) -> AnalysisResponse:
    _validate_analysis_input(resume_text, job_description)
    result = resume_analyzer.analyze(
        resume_text, job_description, only_experience_bullets, file_bullets
    )
    if not result.bullets:
        raise HTTPException(
            status_code=400,
            detail="No bullets detected. Use bullet points in the experience section "
            "or upload a DOCX with list formatting.",
        )
    return result


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": gemini_client.is_configured(),
    }


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze(
    resume_file: UploadFile | None = File(None),
    resume_text: str = Form(""),
    job_description: str = Form(...),
    only_experience_bullets: bool = Form(True),
):
    file_bullets: list[str] = []

    if resume_file is not None and resume_file.filename:
        if not resume_file.filename.lower().endswith(pdf_parser.SUPPORTED_EXTENSIONS):
            raise HTTPException(status_code=415, detail="Only PDF and DOCX files are accepted")

        content = await resume_file.read()
        max_bytes = settings.max_upload_size_mb * 1024 * 1024
        if len(content) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
            )

        try:
            document = pdf_parser.extract_resume_text(resume_file.filename, content)
        except ValueError as e:
            raise HTTPException(status_code=415, detail=str(e))
        except Exception:
            logger.exception("Could not parse uploaded file %s", resume_file.filename)
            raise HTTPException(status_code=400, detail="Could not parse resume file")

        resume_text = document.text
        file_bullets = document.bullets

    return _run_analysis(resume_text, job_description, only_experience_bullets, file_bullets)


@router.post("/analyze/quick", response_model=AnalysisResponse)
async def analyze_quick(body: QuickAnalyzeRequest):
    return _run_analysis(body.resume_text, body.job_description, body.only_experience_bullets)


@router.post("/keywords", response_model=KeywordFitReport)
async def keyword_fit(body: KeywordFitRequest):
    return analyze_keyword_fit(body.resume_text, body.job_description)


@router.post("/bullets/extract", response_model=ExtractionResponse)
async def extract_bullets(body: ExtractBulletsRequest):
    result = extract_bullets_and_jobs(normalize_resume_text(body.resume_text))
    return ExtractionResponse(bullets=result.bullets, jobs=result.jobs)


@router.post("/verb-strength", response_model=VerbStrength)
async def verb_strength(body: VerbStrengthRequest):
    return compute_verb_strength(body.bullet, mode=body.mode)


@router.post("/rewrite-bullet", response_model=RewriteResult)
async def rewrite_bullet(body: RewriteBulletRequest):
    if not body.original_bullet.strip():
        raise HTTPException(status_code=400, detail="Missing original bullet")
    _require_gemini()
    return await resume_analyzer.rewrite_bullet(body)


@router.post("/cover-letter", response_model=CoverLetterResponse)
async def cover_letter(body: CoverLetterRequest):
    if not body.job_description.strip():
        raise HTTPException(status_code=400, detail="Missing job description")
    _require_gemini()
    result = await resume_analyzer.generate_cover_letter(body)
    if result is None:
        raise HTTPException(status_code=502, detail="Cover letter generation failed")
    return result


@router.post("/recommend-tone", response_model=ToneResponse)
async def recommend_tone(body: ToneRequest):
    if not body.job_description.strip():
        raise HTTPException(status_code=400, detail="Missing job description")
    _require_gemini()
    tone = await resume_analyzer.recommend_tone(body)
    if not tone:
        raise HTTPException(status_code=502, detail="Tone recommendation failed")
    return ToneResponse(tone=tone)
