"""Lender catalogue matching for the pre-application loan finder"""

from dataclasses import replace
from typing import List
from techscale_underwriting.domain.credit_readiness import employment_points, income_points
from techscale_underwriting.domain.models import ApplicantProfile, EligibilityTier, LenderOption

CREDIT_HISTORY_POINTS = {
    "excellent": 30,
    "good": 25,
    "fair": 15,
    "limited": 10,
    "none": 5,
}

GREEN_THRESHOLD = 80
YELLOW_THRESHOLD = 60
CO_SIGNER_BONUS = 20
UPSKILLING_LENDER = "Career Boost Finance"

TIER_ORDER = {
    EligibilityTier.GREEN: 0,
    EligibilityTier.YELLOW: 1,
    EligibilityTier.RED: 2,
}

LENDER_CATALOG: List[LenderOption] = [
    LenderOption(
        lender_id="1",
        lender_name="Global Education Finance",
        apr_range="4.5% - 12.8%",
        max_amount="£250,000",
        repayment_term="5-20 years",
        co_signer_required=False,
        grace_period="6 months",
        eligibility_tier=EligibilityTier.GREEN,
        features=["No co-signer required", "Flexible repayment", "Grace period during studies"],
        description="Specialised in international education financing for African students",
        processing_time="2-3 weeks",
        special_offers="No origination fees for African students",
    ),
    LenderOption(
        lender_id="2",
        lender_name="Africa Skills Fund",
        apr_range="6.2% - 15.9%",
        max_amount="£125,000",
        repayment_term="3-15 years",
        co_signer_required=True,
        grace_period="3 months",
        eligibility_tier=EligibilityTier.GREEN,
        features=["Africa-focused", "Career counselling included", "Alumni network access"],
        description="Dedicated to empowering African professionals through education financing",
        processing_time="1-2 weeks",
    ),
    LenderOption(
        lender_id="3",
        lender_name="International Study Loans",
        apr_range="5.8% - 18.2%",
        max_amount="£200,000",
        repayment_term="5-25 years",
        co_signer_required=False,
        grace_period="9 months",
        eligibility_tier=EligibilityTier.YELLOW,
        features=["Global coverage", "Multiple currency options", "Online application"],
        description="Comprehensive education financing for international students worldwide",
        processing_time="3-4 weeks",
    ),
    LenderOption(
        lender_id="4",
        lender_name=UPSKILLING_LENDER,
        apr_range="7.5% - 16.4%",
        max_amount="£80,000",
        repayment_term="2-10 years",
        co_signer_required=True,
        grace_period="1 month",
        eligibility_tier=EligibilityTier.GREEN,
        features=["Upskilling focus", "Quick approval", "Employer partnerships"],
        description="Fast financing solutions for professional development and upskilling",
        processing_time="5-7 days",
    ),
    LenderOption(
        lender_id="5",
        lender_name="Premium Education Capital",
        apr_range="3.9% - 11.5%",
        max_amount="£400,000",
        repayment_term="5-30 years",
        co_signer_required=True,
        grace_period="12 months",
        eligibility_tier=EligibilityTier.YELLOW,
        features=["Premium institutions", "Lowest rates", "Comprehensive coverage"],
        description="Premium financing for top-tier international universities",
        processing_time="4-6 weeks",
    ),
]


def profile_eligibility_score(profile: ApplicantProfile) -> int:
    """Income (0-40) + employment (0-30) + credit history (0-30) + co-signer (20)"""
    return (
        income_points(profile.income_range)
        + employment_points(profile.employment_status)
        + CREDIT_HISTORY_POINTS.get(profile.credit_history or "", 0)
        + (CO_SIGNER_BONUS if profile.has_co_signer else 0)
    )


def _tier_for(score: int) -> EligibilityTier:
    if score >= GREEN_THRESHOLD:
        return EligibilityTier.GREEN
    elif score >= YELLOW_THRESHOLD:
        return EligibilityTier.YELLOW
    return EligibilityTier.RED


def match_lenders(profile: ApplicantProfile, catalog: List[LenderOption] = LENDER_CATALOG) -> List[LenderOption]:
    """
    Rate every lender for the profile and sort green → yellow → red.

    Lender-specific overrides:
    - lenders requiring a co-signer drop to yellow without one
    - the upskilling lender is always green for upskilling profiles
    """
    base_tier = _tier_for(profile_eligibility_score(profile))

    matches = []
    for lender in catalog:
        tier = base_tier
        if lender.co_signer_required and not profile.has_co_signer:
            tier = EligibilityTier.YELLOW
        if profile.loan_purpose == "upskilling" and lender.lender_name == UPSKILLING_LENDER:
            tier = EligibilityTier.GREEN
        matches.append(replace(lender, eligibility_tier=tier))

    return sorted(matches, key=lambda lender: TIER_ORDER[lender.eligibility_tier])
