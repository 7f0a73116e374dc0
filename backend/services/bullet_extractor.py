"""Experience bullet and job segmentation for pasted resume text.

The extractor walks normalized lines once. It only captures content while
inside an Experience section: a month/year date range opens a job, marker
lines and long sentences become bullets, and the two lines before a date
range are kept as company/title candidates.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from models.responses import ExtractedJob, MetaBlocks

logger = logging.getLogger(__name__)

MAX_BULLETS_PER_JOB = 60
MAX_FLAT_BULLETS = 220
MIN_MARKER_BULLET_LEN = 10
MIN_SENTENCE_BULLET_LEN = 25
DEFAULT_JOB_ID = "job_default"

EXPERIENCE_START_HEADINGS: frozenset[str] = frozenset({
    "experience", "work experience", "professional experience", "employment history",
})
_EXPERIENCE_START_PHRASES = ("employment history", "work experience", "professional experience")

EXPERIENCE_END_HEADINGS: frozenset[str] = frozenset({
    "skills", "personal skills", "technical skills", "education", "certificates",
    "certifications", "certificates and training", "training", "projects",
    "achievements", "references",
})
_EXPERIENCE_END_FRAGMENTS = ("certificat", "reference", "education", "skills", "achievements")

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_YEAR = r"(?:19|20)\d{2}"
DATE_RANGE_RE = re.compile(
    rf"\b({_MONTH}\.?\s+{_YEAR}\s*[–—-]\s*(?:{_MONTH}\.?\s+{_YEAR}|present|current))\b",
    re.IGNORECASE,
)

_BULLET_MARKERS = r"(?:•|-|\*|·|o|\uf0b7|‣|∙|–|—)"
BULLET_LINE_RE = re.compile(rf"^{_BULLET_MARKERS}\s+")

# Contact info patterns
EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
URL_RE = re.compile(r"\bhttps?://\S+|\bwww\.\S+", re.IGNORECASE)
LINKEDIN_RE = re.compile(r"\blinkedin\.com/in/\S+", re.IGNORECASE)
CONTACT_LABEL_RE = re.compile(r"^(?:p:|e:|l:|phone:|email:|linkedin:)\s*", re.IGNORECASE)
STREET_RE = re.compile(r"^\d+\s+\w+")
CA_POSTAL_RE = re.compile(
    r"\b[ABCEGHJ-NPRSTVXY]\d[ABCEGHJ-NPRSTV-Z]\s?\d[ABCEGHJ-NPRSTV-Z]\d\b", re.IGNORECASE
)
US_ZIP_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")
REFERENCES_RE = re.compile(r"^references?$", re.IGNORECASE)
UPON_REQUEST_RE = re.compile(r"^available\s+upon\s+request\.?$", re.IGNORECASE)
PERSON_NAME_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2}$")
LABEL_LINE_RE = re.compile(r"^(?:company|role|title|location|dates)\s*:", re.IGNORECASE)
OTHER_HEADING_RE = re.compile(r"^(?:areas of expertise|summary|technical skills)\b", re.IGNORECASE)

_HEADER_DASH_SEP_RE = re.compile(r"\s+—\s+|\s+-\s+|\s+\|\s+| · | • ")
_HEADER_TRIM = " |-–—·•,"
_PHONE_DIGITS = 7
_CONTACT_MAX_LEN = 220


class ExtractorState(Enum):
    OUTSIDE_EXPERIENCE = "outside_experience"
    IN_EXPERIENCE = "in_experience"


class LineKind(Enum):
    EXPERIENCE_START = "experience_start"
    EXPERIENCE_END = "experience_end"
    IGNORED = "ignored"
    DATE_RANGE = "date_range"
    BULLET = "bullet"
    BULLETISH = "bulletish"
    HEADER_CANDIDATE = "header_candidate"
    SKIP = "skip"


@dataclass
class ExtractionResult:
    bullets: list[str] = field(default_factory=list)
    jobs: list[ExtractedJob] = field(default_factory=list)


@dataclass
class ExperienceSlice:
    experience_text: str
    found_section: bool
    mode: str


# ---------------------------------------------------------------------------
# Line helpers and predicates
# ---------------------------------------------------------------------------

def clean_line(line: str) -> str:
    return re.sub(r"\s+", " ", line or "").strip()


def normalize_lines(text: str) -> list[str]:
    """CRLF to LF, trim each line, drop blanks."""
    lines = (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return [line.strip() for line in lines if line.strip()]


def _digit_count(text: str) -> int:
    return sum(ch.isdigit() for ch in text)


def _heading_key(line: str) -> str:
    return clean_line(line).lower().rstrip(":").strip()


def is_experience_start_heading(line: str) -> bool:
    key = _heading_key(line)
    if key in EXPERIENCE_START_HEADINGS:
        return True
    return any(p in key for p in _EXPERIENCE_START_PHRASES)


def is_experience_end_heading(line: str) -> bool:
    key = _heading_key(line)
    if key in EXPERIENCE_END_HEADINGS:
        return True
    return any(f in key for f in _EXPERIENCE_END_FRAGMENTS)


def looks_like_heading(line: str) -> bool:
    l = clean_line(line)
    if not l:
        return False
    if is_experience_start_heading(l) or is_experience_end_heading(l):
        return True
    return OTHER_HEADING_RE.match(l) is not None


def looks_like_contact_or_link(line: str) -> bool:
    l = clean_line(line)
    if CONTACT_LABEL_RE.match(l):
        return True
    if LINKEDIN_RE.search(l):
        return True
    if len(l) < _CONTACT_MAX_LEN and (
        EMAIL_RE.search(l) or URL_RE.search(l) or _digit_count(l) >= _PHONE_DIGITS
    ):
        return True
    return False


def is_definitely_not_bullet(line: str) -> bool:
    """Contact details, addresses, names and reference markers."""
    l = clean_line(line)
    if not l:
        return True
    if EMAIL_RE.search(l) or URL_RE.search(l) or LINKEDIN_RE.search(l):
        return True
    # Phone numbers in any format
    if _digit_count(l) >= _PHONE_DIGITS:
        return True
    if STREET_RE.match(l) or CA_POSTAL_RE.search(l) or US_ZIP_RE.search(l):
        return True
    if REFERENCES_RE.match(l) or UPON_REQUEST_RE.match(l):
        return True
    if PERSON_NAME_RE.match(l):
        return True
    if CONTACT_LABEL_RE.match(l):
        return True
    return False


def is_date_range_line(line: str) -> bool:
    return DATE_RANGE_RE.search(line) is not None


def extract_date_range(line: str) -> str:
    match = DATE_RANGE_RE.search(clean_line(line))
    return match.group(1) if match else ""


def is_bullet_line(line: str) -> bool:
    return BULLET_LINE_RE.match(line) is not None


def strip_bullet(line: str) -> str:
    return BULLET_LINE_RE.sub("", line, count=1).strip()


def _is_excluded(line: str) -> bool:
    return looks_like_heading(line) or looks_like_contact_or_link(line) or is_definitely_not_bullet(line)


def is_bulletish_sentence(line: str) -> bool:
    """An unmarked line long enough to be an accomplishment."""
    l = clean_line(line)
    if not l:
        return False
    if _is_excluded(l) or is_date_range_line(l):
        return False
    if len(l) < MIN_SENTENCE_BULLET_LEN:
        return False
    return LABEL_LINE_RE.match(l) is None


def _split_header(header: str) -> tuple[str, str] | None:
    """Return (company, title) when the header has two separable parts."""
    header = clean_line(header).strip(_HEADER_TRIM)
    if not header:
        return None

    parts = [clean_line(p) for p in _HEADER_DASH_SEP_RE.split(header)]
    parts = [p for p in parts if p]
    if len(parts) >= 2:
        return parts[0], parts[1]

    comma_parts = [clean_line(p) for p in header.split(",")]
    comma_parts = [p for p in comma_parts if p]
    if len(comma_parts) >= 2:
        # "Title, Company"
        return comma_parts[1], comma_parts[0]
    return None


def parse_header(prev2: str, prev1: str, inline_header: str) -> tuple[str, str]:
    """Pick company/title from the date line or the lines just above it."""
    parsed = _split_header(inline_header)
    if parsed is None and prev1 and not prev2:
        parsed = _split_header(prev1)
    if parsed is None:
        parsed = (clean_line(prev2), clean_line(prev1))
    company, title = parsed
    return company or "Company", title or "Role"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

def classify_line(line: str, state: ExtractorState, has_job: bool) -> LineKind:
    """Classify one cleaned line; rules are tested in priority order."""
    if is_experience_start_heading(line):
        return LineKind.EXPERIENCE_START
    if is_experience_end_heading(line):
        return LineKind.EXPERIENCE_END
    if state is ExtractorState.OUTSIDE_EXPERIENCE and not has_job:
        return LineKind.IGNORED
    if is_date_range_line(line):
        return LineKind.DATE_RANGE
    if is_bullet_line(line):
        return LineKind.BULLET
    if has_job and is_bulletish_sentence(line):
        return LineKind.BULLETISH
    if not _is_excluded(line):
        return LineKind.HEADER_CANDIDATE
    return LineKind.SKIP


class _JobExtractor:
    def __init__(self) -> None:
        self.state = ExtractorState.OUTSIDE_EXPERIENCE
        self.current: ExtractedJob | None = None
        self.prev1 = ""
        self.prev2 = ""
        self.jobs: list[ExtractedJob] = []
        self.flat: list[str] = []
        self._job_count = 0

    def _reset_lookback(self) -> None:
        self.prev1 = ""
        self.prev2 = ""

    def _flush(self) -> None:
        if self.current is not None and self.current.bullets:
            self.jobs.append(self.current)

    def _add_bullet(self, text: str) -> None:
        if self.current is None:
            self.current = ExtractedJob(id=DEFAULT_JOB_ID, company="Experience", title="", dates="")
        self.current.bullets.append(text)
        self.flat.append(text)

    def feed(self, line: str) -> None:
        kind = classify_line(line, self.state, self.current is not None)

        if kind is LineKind.EXPERIENCE_START:
            self.state = ExtractorState.IN_EXPERIENCE
            self._reset_lookback()
        elif kind is LineKind.EXPERIENCE_END:
            self._flush()
            self.current = None
            self.state = ExtractorState.OUTSIDE_EXPERIENCE
            self._reset_lookback()
        elif kind is LineKind.DATE_RANGE:
            self._flush()
            dates = extract_date_range(line) or line
            inline_header = clean_line(line.replace(dates, "", 1))
            company, title = parse_header(self.prev2, self.prev1, inline_header)
            self._job_count += 1
            self.current = ExtractedJob(
                id=f"job_{self._job_count}", company=company, title=title, dates=dates,
            )
            self._reset_lookback()
        elif kind is LineKind.BULLET:
            text = strip_bullet(line)
            if len(text) >= MIN_MARKER_BULLET_LEN and not _is_excluded(text):
                self._add_bullet(text)
        elif kind is LineKind.BULLETISH:
            self._add_bullet(line)
        elif kind is LineKind.HEADER_CANDIDATE:
            self.prev2 = self.prev1
            self.prev1 = line

    def finish(self) -> None:
        self._flush()
        self.current = None


def dedupe_bullets(bullets: list[str]) -> list[str]:
    """Case-insensitive, whitespace-insensitive dedup; first occurrence wins."""
    seen: set[str] = set()
    out: list[str] = []
    for b in bullets:
        cleaned = clean_line(b)
        key = cleaned.lower()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        out.append(cleaned)
    return out


def _final_filter(bullets: list[str], limit: int) -> list[str]:
    return [b for b in dedupe_bullets(bullets) if not _is_excluded(b)][:limit]


def extract_bullets_and_jobs(resume_text: str) -> ExtractionResult:
    """Segment resume text into jobs with bullets, plus a flat bullet list."""
    extractor = _JobExtractor()
    for raw_line in normalize_lines(resume_text):
        line = clean_line(raw_line)
        if line:
            extractor.feed(line)
    extractor.finish()

    jobs = [
        job.model_copy(update={"bullets": _final_filter(job.bullets, MAX_BULLETS_PER_JOB)})
        for job in extractor.jobs
    ]
    bullets = _final_filter(extractor.flat, MAX_FLAT_BULLETS)
    logger.debug("Extracted %d jobs, %d bullets", len(jobs), len(bullets))
    return ExtractionResult(bullets=bullets, jobs=jobs)


# ---------------------------------------------------------------------------
# Experience section slicing
# ---------------------------------------------------------------------------

_SLICE_START_NEEDLES = (
    "professional experience", "work experience", "employment history", "experience",
)
_SLICE_END_RE = re.compile(
    r"\n\s*(?:skills|personal skills|technical skills|certificates|certifications|education|"
    r"projects|references|achievements|training|volunteer|interests)\b",
    re.IGNORECASE,
)
_MIN_DATE_ANCHOR_LEN = 14


def normalize_resume_text(text: str) -> str:
    """Unify line endings and spacing while keeping line structure."""
    raw = (text or "").replace("\r\n", "\n").replace("\u00a0", " ")
    raw = re.sub(r"[ \t]+", " ", raw)
    raw = re.sub(r"\n{3,}", "\n\n", raw)
    return raw.strip()


def _cut_at_end_heading(text: str) -> str:
    match = _SLICE_END_RE.search(text)
    if match and match.start() > 0:
        return text[:match.start()]
    return text


def extract_experience_section(text: str) -> ExperienceSlice:
    """Slice out the Experience section.

    Starts at the earliest heading phrase anywhere in the text, even inside
    a sentence. Otherwise starts at the first line with a month/year date
    range. Either way the slice ends at the next major heading (skills,
    education, references, ...).
    """
    normalized = normalize_resume_text(text)

    lower = normalized.lower()
    found = [(lower.find(n), n) for n in _SLICE_START_NEEDLES if n in lower]
    if found:
        start, needle = min(found)
        section = _cut_at_end_heading(normalized[start:])
        return ExperienceSlice(
            experience_text=normalize_resume_text(section),
            found_section=True,
            mode=f"heading:{needle}",
        )

    lines = normalized.split("\n")
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped and len(stripped) >= _MIN_DATE_ANCHOR_LEN and is_date_range_line(stripped):
            section = _cut_at_end_heading("\n".join(lines[i:]))
            return ExperienceSlice(
                experience_text=normalize_resume_text(section),
                found_section=True,
                mode="heuristic",
            )

    return ExperienceSlice(experience_text=normalized, found_section=False, mode="none")


# ---------------------------------------------------------------------------
# Fallback strategies (when strict extraction finds nothing)
# ---------------------------------------------------------------------------

_SYMBOL_START_RE = re.compile(r"^[•▪◦‣·\-*]\s*(.+)$")
_DASH_START_RE = re.compile(r"^[–—]\s*(.+)$")
_NUMBER_START_RE = re.compile(r"^\d{1,2}[.)\-]\s*(.+)$")
_LETTER_START_RE = re.compile(r"^[a-zA-Z][.)]\s*(.+)$")
_INDENTED_RE = re.compile(r"^\s{2,}")
_FALLBACK_HEADING_RE = re.compile(
    r"^(?:experience|work experience|skills|summary|education|projects|certifications)\b",
    re.IGNORECASE,
)
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?;])\s+")

MIN_FALLBACK_BULLET_LEN = 12
MARKER_FALLBACK_LIMIT = 60
FALLBACK_LIMIT = 80
REASONABLE_LINE_MIN = 25
REASONABLE_LINE_MAX = 300


def _match_bullet_start(line: str) -> str | None:
    for pattern in (_SYMBOL_START_RE, _DASH_START_RE, _NUMBER_START_RE, _LETTER_START_RE):
        match = pattern.match(line)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def _fallback_heading(line: str) -> bool:
    l = line.strip()
    if len(l) <= 3:
        return True
    if _FALLBACK_HEADING_RE.match(l):
        return True
    # All-caps short lines are usually headings
    return len(l) < 40 and l == l.upper() and any(ch.isalpha() for ch in l)


def split_marker_lines(text: str) -> list[str]:
    """Bullets by leading marker, folding indented continuation lines in."""
    bullets: list[str] = []
    current: str | None = None

    def flush() -> None:
        if current is None:
            return
        cleaned = clean_line(current)
        if len(cleaned) >= MIN_FALLBACK_BULLET_LEN and not _fallback_heading(cleaned):
            bullets.append(cleaned)

    for raw_line in (text or "").replace("\r\n", "\n").split("\n"):
        line = raw_line.replace("\t", "  ")
        stripped = line.strip()
        if not stripped:
            flush()
            current = None
            continue

        start = _match_bullet_start(stripped)
        if start:
            flush()
            current = start
            continue

        if current is not None and _INDENTED_RE.match(line):
            current = f"{current} {stripped}"
            continue

        flush()
        current = None

    flush()
    return dedupe_bullets(bullets)[:MARKER_FALLBACK_LIMIT]


def split_inline_bullets(text: str) -> list[str]:
    if "•" not in (text or ""):
        return []
    parts = [clean_line(p) for p in text.split("•")]
    return dedupe_bullets([p for p in parts if len(p) >= MIN_FALLBACK_BULLET_LEN])[:FALLBACK_LIMIT]


def reasonable_lines(text: str) -> list[str]:
    kept = [
        line for line in (clean_line(l) for l in normalize_lines(text))
        if REASONABLE_LINE_MIN <= len(line) <= REASONABLE_LINE_MAX
        and not _fallback_heading(line)
        and not _is_excluded(line)
    ]
    return dedupe_bullets(kept)[:FALLBACK_LIMIT]


def sentence_chunks(text: str) -> list[str]:
    flat = clean_line(text)
    if not flat:
        return []
    chunks = [c.strip() for c in _SENTENCE_SPLIT_RE.split(flat)]
    return dedupe_bullets([c for c in chunks if len(c) >= REASONABLE_LINE_MIN])[:FALLBACK_LIMIT]


FALLBACK_STRATEGIES = (
    ("markers", split_marker_lines),
    ("inline", split_inline_bullets),
    ("lines", reasonable_lines),
    ("sentences", sentence_chunks),
)


def fallback_bullets(text: str) -> tuple[list[str], str]:
    """Try each fallback strategy in order; return (bullets, strategy name)."""
    for name, strategy in FALLBACK_STRATEGIES:
        bullets = strategy(text)
        if bullets:
            logger.info("Bullet fallback strategy '%s' produced %d bullets", name, len(bullets))
            return bullets, name
    return [], "none"


# ---------------------------------------------------------------------------
# Meta blocks (metadata lines that are not bullets)
# ---------------------------------------------------------------------------

MAX_GAMES_SHIPPED = 30
MAX_METRIC_LINES = 50
MAX_METRIC_LINE_LEN = 110

_GAMES_SHIPPED_RE = re.compile(r"^(?:\U0001F3AE\s*)?games shipped:", re.IGNORECASE)
_METRIC_LIKE_RE = re.compile(
    r"%|\$\s?\d|\b\d+(?:\.\d+)?\s?(?:ms|s|sec|secs|minutes|min|hrs|hours|days|weeks)\b"
    r"|\b\d+(?:\.\d+)?x\b",
    re.IGNORECASE,
)
_MONTH_YEAR_RE = re.compile(
    r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)\s+(?:19|20)\d{2}\b",
    re.IGNORECASE,
)
_PHONE_RE = re.compile(r"\b\d{3}[-.)\s]*\d{3}[-.\s]*\d{4}\b")


def extract_meta_blocks(text: str) -> MetaBlocks:
    """Collect "Games shipped:" lines and short metric lines from the whole resume."""
    games: list[str] = []
    metrics: list[str] = []

    for raw_line in normalize_lines(normalize_resume_text(text)):
        line = clean_line(raw_line)
        if _GAMES_SHIPPED_RE.match(line):
            games.append(line)
            continue
        if len(line) > MAX_METRIC_LINE_LEN or not _METRIC_LIKE_RE.search(line):
            continue
        # Date ranges and phone numbers look numeric but are not metrics
        if _MONTH_YEAR_RE.search(line) or _PHONE_RE.search(line):
            continue
        metrics.append(line)

    return MetaBlocks(
        games_shipped=list(dict.fromkeys(games))[:MAX_GAMES_SHIPPED],
        metrics=list(dict.fromkeys(metrics))[:MAX_METRIC_LINES],
    )
