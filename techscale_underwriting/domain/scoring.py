"""Scoring primitives - map a single applicant attribute to a 0-100 sub-score with rationale"""

from typing import Optional, Tuple
from techscale_underwriting.domain.models import PersonalInfo, ScoreDetail
from techscale_underwriting.utils.numbers import parse_amount, round_half_up

# Midpoint estimates for the income buckets offered by the application form
INCOME_BUCKET_ESTIMATES = {
    "under-10k": 5_000,
    "10k-25k": 17_500,
    "25k-50k": 37_500,
    "50k-100k": 75_000,
    "over-100k": 120_000,
}

# (minimum annual income, points), checked top-down
INCOME_LADDER: Tuple[Tuple[float, int], ...] = (
    (100_000, 100),
    (50_000, 85),
    (35_000, 70),
    (25_000, 55),
    (15_000, 40),
)
INCOME_ANY_POINTS = 25
INCOME_NONE_POINTS = 10

# (keywords, points, label), first group with a keyword present wins
EDUCATION_LEVELS: Tuple[Tuple[Tuple[str, ...], int, str], ...] = (
    (("phd", "doctor"), 100, "doctorate"),
    (("master", "mba", "msc", "postgrad"), 90, "master's degree"),
    (("bachelor", "bsc", "undergrad", "degree"), 80, "bachelor's degree"),
    (("diploma", "hnd", "college", "certificate", "associate"), 65, "diploma"),
    (("high school", "high-school", "secondary", "a-level", "gcse"), 50, "secondary education"),
)
EDUCATION_NONE_POINTS = 30

EMPLOYMENT_POINTS = {
    "full-time": 90,
    "employed-full-time": 90,
    "self-employed": 75,
    "employed": 70,
    "contract": 70,
    "part-time": 60,
    "employed-part-time": 60,
    "student": 45,
    "unemployed": 20,
}
EMPLOYMENT_NONE_POINTS = 20

PERSONAL_INFO_ITEMS = (
    "first name",
    "last name",
    "date of birth",
    "nationality",
    "email",
    "phone",
    "address",
)


def estimate_annual_income(household_income: Optional[str]) -> float:
    """Resolve a bucket label or free-text income to a number; 0 when unparseable"""
    if not household_income:
        return 0.0
    key = household_income.strip().lower()
    if key in INCOME_BUCKET_ESTIMATES:
        return float(INCOME_BUCKET_ESTIMATES[key])
    return parse_amount(household_income) or 0.0


def score_income(household_income: Optional[str]) -> ScoreDetail:
    """
    Affordability sub-score from annual household income.

    Ladder (annual GBP):
    - £100,000+ → 100
    - £50,000+  → 85
    - £35,000+  → 70
    - £25,000+  → 55
    - £15,000+  → 40
    - any income → 25
    - none / unparseable → 10
    """
    income = estimate_annual_income(household_income)
    if income <= 0:
        return ScoreDetail(
            score=INCOME_NONE_POINTS,
            details=f"Household income not provided or unreadable ({household_income!r})",
        )

    for threshold, points in INCOME_LADDER:
        if income >= threshold:
            return ScoreDetail(
                score=points,
                details=f"Household income £{income:,.0f} meets the £{threshold:,.0f}+ bracket",
            )

    return ScoreDetail(
        score=INCOME_ANY_POINTS,
        details=f"Household income £{income:,.0f} is below £{INCOME_LADDER[-1][0]:,.0f}",
    )


def score_education(qualification: Optional[str]) -> ScoreDetail:
    """
    Education sub-score from the highest-qualification free text.

    Matching is case-insensitive substring search so "Master's Degree",
    "MSc Data Science" and "masters" all land on the master's level.
    """
    text = (qualification or "").lower()
    for keywords, points, label in EDUCATION_LEVELS:
        if any(keyword in text for keyword in keywords):
            return ScoreDetail(score=points, details=f"Highest qualification recognised as {label}")

    return ScoreDetail(
        score=EDUCATION_NONE_POINTS,
        details=f"No recognised qualification ({qualification!r})",
    )


def score_employment(employment_status: Optional[str]) -> ScoreDetail:
    status = (employment_status or "").strip().lower()
    if status in EMPLOYMENT_POINTS:
        return ScoreDetail(score=EMPLOYMENT_POINTS[status], details=f"Employment status: {status}")

    return ScoreDetail(
        score=EMPLOYMENT_NONE_POINTS,
        details=f"Employment status unknown ({employment_status!r})",
    )


def score_personal_info(personal_info: Optional[PersonalInfo]) -> ScoreDetail:
    """Completeness of the personal-details section, 0-100"""
    if personal_info is None:
        return ScoreDetail(score=0, details="Personal information missing")

    address = personal_info.address
    present = {
        "first name": bool(personal_info.first_name.strip()),
        "last name": bool(personal_info.last_name.strip()),
        "date of birth": bool(personal_info.date_of_birth.strip()),
        "nationality": bool(personal_info.nationality.strip()),
        "email": bool(personal_info.email.strip()),
        "phone": bool(personal_info.phone.strip()),
        "address": address is not None
        and all(part.strip() for part in (address.street, address.city, address.postal_code, address.country)),
    }
    missing = [item for item in PERSONAL_INFO_ITEMS if not present[item]]
    filled = len(PERSONAL_INFO_ITEMS) - len(missing)
    score = int(round_half_up(100 * filled / len(PERSONAL_INFO_ITEMS)))

    if not missing:
        return ScoreDetail(score=score, details="Personal information complete")
    return ScoreDetail(
        score=score,
        details=f"Personal information {filled}/{len(PERSONAL_INFO_ITEMS)} complete; missing {', '.join(missing)}",
    )
