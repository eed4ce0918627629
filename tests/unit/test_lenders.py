"""Unit tests for lender catalogue matching"""

from techscale_underwriting.domain.lenders import (
    LENDER_CATALOG,
    match_lenders,
    profile_eligibility_score,
)
from techscale_underwriting.domain.models import ApplicantProfile, EligibilityTier


def test_profile_eligibility_score():
    profile = ApplicantProfile(
        income_range="50k-100k",
        employment_status="employed-full-time",
        credit_history="good",
        has_co_signer=True,
    )
    # 35 + 30 + 25 + 20
    assert profile_eligibility_score(profile) == 110


def test_strong_profile_with_co_signer_is_green_everywhere():
    profile = ApplicantProfile(
        income_range="over-100k",
        employment_status="employed-full-time",
        credit_history="excellent",
        has_co_signer=True,
    )

    lenders = match_lenders(profile)

    assert len(lenders) == len(LENDER_CATALOG)
    assert all(lender.eligibility_tier == EligibilityTier.GREEN for lender in lenders)
    assert [lender.lender_id for lender in lenders] == ["1", "2", "3", "4", "5"]


def test_co_signer_requirement_drops_to_yellow():
    profile = ApplicantProfile(
        income_range="50k-100k",
        employment_status="employed-full-time",
        credit_history="good",
        has_co_signer=False,
    )

    lenders = match_lenders(profile)

    assert [lender.lender_id for lender in lenders] == ["1", "3", "2", "4", "5"]
    tiers = {lender.lender_id: lender.eligibility_tier for lender in lenders}
    assert tiers["1"] == EligibilityTier.GREEN
    assert tiers["2"] == EligibilityTier.YELLOW


def test_weak_upskilling_profile():
    profile = ApplicantProfile(
        income_range="under-10k",
        employment_status="unemployed",
        credit_history="none",
        loan_purpose="upskilling",
    )

    lenders = match_lenders(profile)
    tiers = [(lender.lender_id, lender.eligibility_tier) for lender in lenders]

    assert tiers == [
        ("4", EligibilityTier.GREEN),
        ("2", EligibilityTier.YELLOW),
        ("5", EligibilityTier.YELLOW),
        ("1", EligibilityTier.RED),
        ("3", EligibilityTier.RED),
    ]


def test_catalog_left_untouched():
    match_lenders(ApplicantProfile(income_range="under-10k"))
    assert LENDER_CATALOG[2].eligibility_tier == EligibilityTier.YELLOW
    assert LENDER_CATALOG[0].eligibility_tier == EligibilityTier.GREEN
