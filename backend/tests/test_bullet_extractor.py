from services.bullet_extractor import (
    DEFAULT_JOB_ID,
    ExtractorState,
    LineKind,
    classify_line,
    dedupe_bullets,
    extract_bullets_and_jobs,
    extract_date_range,
    extract_experience_section,
    extract_meta_blocks,
    fallback_bullets,
    is_definitely_not_bullet,
    is_experience_end_heading,
    is_experience_start_heading,
    parse_header,
    split_marker_lines,
    strip_bullet,
)


def test_single_job_scenario():
    text = (
        "EXPERIENCE\nQA Lead, Acme Corp\nJan 2020 – Present\n"
        "• Led automation initiative across 3 teams\n\nSKILLS\nSelenium, Jira"
    )
    result = extract_bullets_and_jobs(text)
    assert len(result.jobs) == 1
    job = result.jobs[0]
    assert job.company == "Acme Corp"
    assert job.title == "QA Lead"
    assert job.dates == "Jan 2020 – Present"
    assert job.bullets == ["Led automation initiative across 3 teams"]
    assert result.bullets == ["Led automation initiative across 3 teams"]


def test_multiple_jobs(sample_resume):
    result = extract_bullets_and_jobs(sample_resume)
    assert [j.id for j in result.jobs] == ["job_1", "job_2"]
    assert result.jobs[1].company == "Globex"
    assert result.jobs[1].title == "QA Tester"
    assert result.jobs[1].dates == "Mar 2017 - Dec 2019"
    assert result.jobs[1].bullets == [
        "Tested REST APIs with Postman and tracked defects in Jira",
        "Documented test plans for mobile releases",
    ]
    assert len(result.bullets) == 5


def test_lines_outside_experience_are_ignored(sample_resume):
    result = extract_bullets_and_jobs(sample_resume)
    assert "Selenium, Jira, Postman" not in result.bullets
    assert not any("example.com" in b for b in result.bullets)
    assert not any("QA engineer focused" in b for b in result.bullets)


def test_dedupes_within_job():
    text = (
        "Experience\nAcme - QA Engineer\nFeb 2021 - Present\n"
        "- Built API tests in Postman for checkout\n"
        "- built  api tests in postman for CHECKOUT\n"
        "- Triaged production incidents weekly\n"
    )
    result = extract_bullets_and_jobs(text)
    assert result.jobs[0].bullets == [
        "Built API tests in Postman for checkout",
        "Triaged production incidents weekly",
    ]
    keys = [b.lower() for b in result.bullets]
    assert len(keys) == len(set(keys))


def test_contact_and_short_bullets_dropped():
    text = (
        "Work Experience\nInitech | Tester\nMay 2018 - Jan 2020\n"
        "- jane@example.com\n- linkedin.com/in/jane\n- Too short\n"
        "- Validated payment flows across web and mobile\n"
    )
    result = extract_bullets_and_jobs(text)
    assert result.bullets == ["Validated payment flows across web and mobile"]


def test_bulletish_sentence_without_marker():
    text = (
        "Experience\nInitech | Tester\nMay 2018 - Jan 2020\n"
        "Owned the release checklist for twelve mobile launches\n"
        "Short line\n"
    )
    result = extract_bullets_and_jobs(text)
    assert result.bullets == ["Owned the release checklist for twelve mobile launches"]


def test_bullet_mentioning_skills_ends_section():
    text = (
        "Experience\nInitech | Tester\nMay 2018 - Jan 2020\n"
        "- Coached juniors on debugging skills during onboarding\n"
        "- Automated smoke tests for every nightly build\n"
    )
    result = extract_bullets_and_jobs(text)
    assert result.bullets == []
    assert result.jobs == []


def test_sentence_with_work_experience_reopens_section():
    text = (
        "Experience\nInitech | Tester\nMay 2018 - Jan 2020\n"
        "- Coached juniors on debugging skills during onboarding\n"
        "- Gained hands-on work experience with Kafka streams\n"
        "Globex | Analyst\nJun 2020 - Present\n"
        "- Automated smoke tests for every nightly build\n"
    )
    result = extract_bullets_and_jobs(text)
    assert result.bullets == ["Automated smoke tests for every nightly build"]
    assert [(j.id, j.company, j.title) for j in result.jobs] == [("job_2", "Globex", "Analyst")]


def test_job_without_bullets_is_not_emitted():
    text = "Experience\nInitech | Tester\nMay 2018 - Jan 2020\n\nEducation\nBSc"
    assert extract_bullets_and_jobs(text).jobs == []


def test_no_experience_section():
    result = extract_bullets_and_jobs("Skills\n- Python and Selenium scripting")
    assert result.bullets == []
    assert result.jobs == []


def test_empty_input():
    result = extract_bullets_and_jobs("")
    assert result.bullets == []
    assert result.jobs == []


def test_marker_bullet_before_any_date_gets_placeholder_job():
    result = extract_bullets_and_jobs("Experience\n- Automated nightly regression runs")
    assert result.jobs[0].id == DEFAULT_JOB_ID
    assert result.jobs[0].company == "Experience"


def test_heading_predicates():
    assert is_experience_start_heading("PROFESSIONAL EXPERIENCE:")
    assert is_experience_start_heading("Employment History")
    assert not is_experience_start_heading("- Gained experience with Kafka")
    assert is_experience_end_heading("Technical Skills")
    assert is_experience_end_heading("Licenses & Certifications")
    assert is_experience_start_heading("Gained hands-on work experience with Kafka")
    assert is_experience_end_heading("- Taught testing skills to new hires on the team")
    assert is_experience_end_heading("Education and training")


def test_definitely_not_bullet():
    assert is_definitely_not_bullet("+1 (416) 555-0199")
    assert is_definitely_not_bullet("123 Main Street")
    assert is_definitely_not_bullet("Toronto, ON M5V 2T6")
    assert is_definitely_not_bullet("Available upon request")
    assert is_definitely_not_bullet("Jane Doe")
    assert is_definitely_not_bullet("e: jane@example.com")
    assert not is_definitely_not_bullet("Led automation initiative across 3 teams")


def test_date_range_extraction():
    assert extract_date_range("Acme Corp Jan 2020 - Mar 2022") == "Jan 2020 - Mar 2022"
    assert extract_date_range("September 2019 — Current") == "September 2019 — Current"
    assert extract_date_range("2019 - 2020") == ""


def test_strip_bullet():
    assert strip_bullet("• Led the team") == "Led the team"
    assert strip_bullet("o Optimized queries") == "Optimized queries"
    assert strip_bullet("optimized queries") == "optimized queries"


def test_parse_header():
    assert parse_header("", "", "Acme — QA Lead") == ("Acme", "QA Lead")
    assert parse_header("", "QA Lead, Acme Corp", "") == ("Acme Corp", "QA Lead")
    assert parse_header("Acme Corp", "Senior Tester", "") == ("Acme Corp", "Senior Tester")
    assert parse_header("", "", "") == ("Company", "Role")


def test_classify_line_transitions():
    outside = ExtractorState.OUTSIDE_EXPERIENCE
    inside = ExtractorState.IN_EXPERIENCE
    assert classify_line("Experience", outside, False) is LineKind.EXPERIENCE_START
    assert classify_line("Education", inside, True) is LineKind.EXPERIENCE_END
    assert classify_line("Python, Selenium", outside, False) is LineKind.IGNORED
    assert classify_line("Jan 2020 - Present", inside, False) is LineKind.DATE_RANGE
    assert classify_line("- Led the test guild", inside, True) is LineKind.BULLET
    assert classify_line("Acme | Tester", inside, False) is LineKind.HEADER_CANDIDATE
    assert classify_line("jane@example.com", inside, False) is LineKind.SKIP


def test_dedupe_bullets_keeps_first():
    assert dedupe_bullets(["Built X  fast", "built x fast", "Other"]) == ["Built X fast", "Other"]


def test_experience_section_by_heading(sample_resume):
    sliced = extract_experience_section(sample_resume)
    assert sliced.found_section
    assert sliced.mode == "heading:experience"
    assert sliced.experience_text.startswith("EXPERIENCE")
    assert "SKILLS" not in sliced.experience_text


def test_experience_section_starts_at_first_mention():
    text = (
        "Summary\nFive years of experience in QA automation\n"
        "Experience\nAcme | Tester\nJan 2020 - Present\n- Automated nightly regression runs\n"
        "Skills\nPython"
    )
    sliced = extract_experience_section(text)
    assert sliced.mode == "heading:experience"
    assert sliced.experience_text.startswith("experience in QA automation")
    assert "Python" not in sliced.experience_text
    assert extract_bullets_and_jobs(sliced.experience_text).bullets == [
        "Automated nightly regression runs"
    ]


def test_experience_section_by_date_heuristic():
    text = "Jane Doe\nAcme | Tester\nJan 2020 - Present\n- Led things well\n\nEducation\nBSc"
    sliced = extract_experience_section(text)
    assert sliced.mode == "heuristic"
    assert sliced.experience_text.startswith("Jan 2020 - Present")
    assert "Education" not in sliced.experience_text


def test_experience_section_not_found():
    sliced = extract_experience_section("Just a paragraph about me.")
    assert not sliced.found_section
    assert sliced.mode == "none"
    assert sliced.experience_text == "Just a paragraph about me."


def test_split_marker_lines_folds_continuations():
    text = "1. Automated the regression suite\n   for three products\n2) Reviewed pull requests daily"
    assert split_marker_lines(text) == [
        "Automated the regression suite for three products",
        "Reviewed pull requests daily",
    ]


def test_fallback_bullets_order():
    bullets, strategy = fallback_bullets("- Automated the regression suite\n- Reviewed pull requests")
    assert strategy == "markers"
    assert len(bullets) == 2

    bullets, strategy = fallback_bullets("Built dashboards for QA • Reduced flaky tests by half")
    assert strategy == "inline"
    assert bullets == ["Built dashboards for QA", "Reduced flaky tests by half"]

    text = "Managed release readiness reviews for the payments platform."
    bullets, strategy = fallback_bullets(text)
    assert strategy == "lines"
    assert bullets == [text]

    assert fallback_bullets("") == ([], "none")


def test_meta_blocks_games_and_metrics():
    text = (
        "Jane Doe\n"
        "\U0001F3AE Games shipped: Space Run, Tiny Tanks\n"
        "Games shipped: Orbit Quest\n"
        "Games shipped: Orbit Quest\n"
        "- Cut build times by 40%\n"
        "- Saved $12k in yearly cloud spend\n"
        "- Kept load tests under 250 ms at p95\n"
        "- Cut build times by 40%\n"
        "- Led automation across 3 teams\n"
    )
    meta = extract_meta_blocks(text)
    assert meta.games_shipped == [
        "\U0001F3AE Games shipped: Space Run, Tiny Tanks",
        "Games shipped: Orbit Quest",
    ]
    assert meta.metrics == [
        "- Cut build times by 40%",
        "- Saved $12k in yearly cloud spend",
        "- Kept load tests under 250 ms at p95",
    ]


def test_meta_blocks_skip_dates_and_phone_numbers():
    text = (
        "Acme | QA Lead Jan 2020 - Dec 2021, coverage up 25%\n"
        "Phone: 416-555-0199 (replies within 2 days)\n"
        "Shipped 3x more releases per quarter\n"
        + "Raised coverage by 10% " * 10
    )
    assert extract_meta_blocks(text).metrics == ["Shipped 3x more releases per quarter"]


def test_meta_blocks_are_capped():
    text = "\n".join(f"Cut latency by {i}%" for i in range(60))
    assert len(extract_meta_blocks(text).metrics) == 50
    assert extract_meta_blocks("").games_shipped == []
