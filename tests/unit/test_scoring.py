"""Unit tests for the single-attribute scoring primitives"""

import pytest
from techscale_underwriting.domain.models import Address, PersonalInfo
from techscale_underwriting.domain.scoring import (
    estimate_annual_income,
    score_education,
    score_employment,
    score_income,
    score_personal_info,
)


@pytest.mark.parametrize(
    "household_income,expected",
    [
        ("£120,000", 100),
        ("£100,000", 100),
        ("£60,000", 85),
        ("50k-100k", 85),
        ("£35,000", 70),
        ("25k", 55),
        ("£15,000", 40),
        ("£12,000", 25),
        ("under-10k", 25),
    ],
)
def test_score_income_brackets(household_income, expected):
    assert score_income(household_income).score == expected


@pytest.mark.parametrize("household_income", ["", None, "prefer not to say"])
def test_score_income_unparseable_falls_to_lowest(household_income):
    """Unreadable income counts as zero income"""
    detail = score_income(household_income)
    assert detail.score == 10
    assert "not provided" in detail.details


def test_estimate_annual_income_bucket_labels():
    assert estimate_annual_income("over-100k") == 120000
    assert estimate_annual_income("10k-25k") == 17500
    assert estimate_annual_income("£42,500.50") == 42500.5


@pytest.mark.parametrize(
    "qualification,expected",
    [
        ("PhD Physics", 100),
        ("Master's Degree", 90),
        ("MBA", 90),
        ("BSc Economics", 80),
        ("Higher National Diploma", 65),
        ("GCSE", 50),
        ("Coding bootcamp", 30),
        ("", 30),
        (None, 30),
    ],
)
def test_score_education_levels(qualification, expected):
    assert score_education(qualification).score == expected


@pytest.mark.parametrize(
    "status,expected",
    [
        ("full-time", 90),
        ("Full-Time", 90),
        ("self-employed", 75),
        ("employed", 70),
        ("contract", 70),
        ("part-time", 60),
        ("student", 45),
        ("unemployed", 20),
        ("freelance", 20),
        (None, 20),
    ],
)
def test_score_employment_statuses(status, expected):
    assert score_employment(status).score == expected


def test_score_personal_info_complete(complete_personal_info):
    detail = score_personal_info(complete_personal_info)
    assert detail.score == 100
    assert detail.details == "Personal information complete"


def test_score_personal_info_missing_record():
    assert score_personal_info(None).score == 0


def test_score_personal_info_partial(complete_personal_info):
    """5 of 7 items present → round(71.43) = 71"""
    complete_personal_info.email = ""
    complete_personal_info.phone = "  "

    detail = score_personal_info(complete_personal_info)

    assert detail.score == 71
    assert "missing email, phone" in detail.details


def test_score_personal_info_incomplete_address():
    info = PersonalInfo(
        first_name="Kofi",
        last_name="Mensah",
        date_of_birth="1999-01-01",
        nationality="Ghanaian",
        email="kofi@example.com",
        phone="+233200000000",
        address=Address(street="", city="Accra", postal_code="GA-123", country="Ghana"),
    )
    # 6/7 = 85.71
    assert score_personal_info(info).score == 86


def test_scores_stay_in_range():
    for detail in (
        score_income("£10,000,000"),
        score_education("phd"),
        score_employment("full-time"),
        score_personal_info(None),
    ):
        assert 0 <= detail.score <= 100
