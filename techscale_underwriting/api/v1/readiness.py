"""POST /v1/credit-readiness and POST /v1/lender-matches - pre-application tools"""

from dataclasses import asdict
from fastapi import APIRouter

from techscale_underwriting.api.v1.schemas import (
    CreditFactorsSchema,
    CreditScoreResponse,
    LenderMatchResponse,
    LenderOptionSchema,
)
from techscale_underwriting.domain.credit_readiness import calculate_credit_readiness
from techscale_underwriting.domain.lenders import match_lenders
from techscale_underwriting.domain.models import ApplicantProfile

router = APIRouter()


@router.post("/credit-readiness", response_model=CreditScoreResponse)
def credit_readiness(profile: ApplicantProfile):
    """Score an intake profile and suggest improvements; no account required"""
    result = calculate_credit_readiness(profile)
    return CreditScoreResponse(
        score=result.score,
        tier=result.tier.value,
        factors=CreditFactorsSchema(**asdict(result.factors)),
        tips=result.tips,
    )


@router.post("/lender-matches", response_model=LenderMatchResponse)
def lender_matches(profile: ApplicantProfile):
    """Rate the lender catalogue for a profile, best eligibility first"""
    lenders = [
        LenderOptionSchema(**{**asdict(lender), "eligibility_tier": lender.eligibility_tier.value})
        for lender in match_lenders(profile)
    ]
    return LenderMatchResponse(lenders=lenders)
