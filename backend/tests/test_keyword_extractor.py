import pytest

from services.keyword_extractor import (
    MAX_TERMS,
    analyze_keyword_fit,
    score_terms,
    term_present,
)

QA_JOB = (
    "Looking for a QA Engineer with strong experience in Selenium and CI/CD pipelines. "
    "Requirements: Jira, Postman."
)


def test_score_terms_covers_tools_and_aliases():
    terms = score_terms(QA_JOB)
    tokens = {part for t in terms for part in t.parts}
    for expected in ("selenium", "cicd", "jira", "postman"):
        assert expected in tokens


def test_score_terms_ranks_tool_terms_above_generic():
    ranked = [t.term for t in score_terms(QA_JOB)]
    assert ranked[0] == "looking engineer selenium"
    # Same n-gram size and frequency, only the tool boost differs
    assert ranked.index("engineer selenium") < ranked.index("looking engineer")
    assert ranked.index("selenium cicd") < ranked.index("cicd pipelines")


def test_score_terms_blocks_covered_unigrams():
    ranked = [t.term for t in score_terms(QA_JOB)]
    assert "selenium" not in ranked
    assert "jira" not in ranked
    assert all(" " in term for term in ranked)


def test_score_terms_drops_stopwords_and_short_tokens():
    ranked = [t.term for t in score_terms(QA_JOB)]
    for term in ranked:
        for part in term.split(" "):
            assert part not in ("qa", "strong", "experience", "with")


def test_score_terms_single_tool_word():
    terms = score_terms("Selenium")
    assert [t.term for t in terms] == ["selenium"]
    assert terms[0].score == pytest.approx(1.4)


def test_score_terms_requirements_boost():
    terms = {t.term: t.score for t in score_terms("Requirements: Docker Kubernetes")}
    assert terms["docker kubernetes"] == pytest.approx(2.2 * 1.2)
    assert terms["requirements docker"] == pytest.approx(2.2)


def test_score_terms_sorted_descending():
    scores = [t.score for t in score_terms(QA_JOB)]
    assert scores == sorted(scores, reverse=True)


def test_score_terms_capped():
    words = " ".join(f"skillword{chr(97 + i % 26)}{chr(97 + i // 26)}" for i in range(80))
    assert len(score_terms(words)) <= MAX_TERMS


def test_score_terms_empty():
    assert score_terms("") == []
    assert score_terms("the and of to") == []


def test_term_present():
    assert term_present("built cicd pipelines in jenkins", "cicd pipelines")
    assert term_present("built cicd pipelines in jenkins", "jenkins")
    assert not term_present("javascript developer", "java")
    assert not term_present("built pipelines", "cicd pipelines")


def test_keyword_fit_full_match():
    report = analyze_keyword_fit("Selenium automation expert", "Selenium automation")
    assert report.keywords_from_job == ["selenium automation"]
    assert report.keywords_found_in_resume == ["selenium automation"]
    assert report.missing_keywords == []
    assert report.match_score == 100


def test_keyword_fit_empty_job():
    report = analyze_keyword_fit("Anything at all", "")
    assert report.match_score == 0
    assert report.keywords_from_job == []
    assert report.missing_keywords == []


def test_keyword_fit_partitions_terms(sample_resume):
    report = analyze_keyword_fit(sample_resume, QA_JOB)
    assert 0 <= report.match_score <= 100
    assert set(report.keywords_found_in_resume) | set(report.missing_keywords) == set(
        report.keywords_from_job
    )
    assert not set(report.keywords_found_in_resume) & set(report.missing_keywords)
    assert report.high_impact_missing == report.missing_keywords[:10]
    # "Selenium, Jira, Postman" in the skills line normalizes to a matching phrase
    assert "jira postman" in report.keywords_found_in_resume


def test_keyword_fit_no_overlap():
    report = analyze_keyword_fit("Pastry chef and baker", "Kubernetes operators")
    assert report.match_score == 0
    assert report.missing_keywords == ["kubernetes operators"]
