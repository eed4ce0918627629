"""Self-service credit readiness score for applicants without a submitted application"""

from typing import List, Optional
from techscale_underwriting.domain.models import ApplicantProfile, CreditFactors, CreditScore, CreditTier
from techscale_underwriting.utils.numbers import round_half_up

INCOME_POINTS = {
    "over-100k": 40,
    "50k-100k": 35,
    "25k-50k": 25,
    "10k-25k": 15,
    "under-10k": 5,
}
MAX_INCOME_POINTS = 40

EMPLOYMENT_POINTS = {
    "employed-full-time": 30,
    "self-employed": 25,
    "employed-part-time": 20,
    "student": 15,
    "unemployed": 5,
}
MAX_EMPLOYMENT_POINTS = 30

HIGH_DEMAND_FIELDS = {"computer-science", "data-science", "engineering", "medicine", "finance"}
EDUCATION_BASE_POINTS = 5
HIGH_DEMAND_BONUS = 3
UPSKILLING_BONUS = 2
MAX_EDUCATION_POINTS = 10

CO_SIGNER_POINTS = 20

MAX_TIPS = 4

TIP_INCOME = (
    "Consider documenting additional income sources or wait until your income increases "
    "to improve loan eligibility."
)
TIP_EMPLOYMENT = (
    "Stable full-time employment significantly improves your loan approval chances. "
    "Consider securing employment before applying."
)
TIP_CO_SIGNER = (
    "Adding a co-signer with good credit can dramatically improve your approval odds "
    "and potentially lower interest rates."
)
TIP_CREDIT_HISTORY = (
    "Start building credit history with a secured credit card or become an authorized user "
    "on someone else's account."
)
TIP_INSTITUTION = "Having a confirmed institution acceptance can strengthen your loan application significantly."
TIP_MULTIPLE_LENDERS = (
    "Consider applying to multiple lenders to compare offers and increase your chances of approval."
)
TIP_STRONG_PROFILE = (
    "Your profile looks strong! Consider getting pre-qualified to understand your exact loan terms."
)


def income_points(income_range: Optional[str]) -> int:
    return INCOME_POINTS.get(income_range or "", 0)


def employment_points(employment_status: Optional[str]) -> int:
    return EMPLOYMENT_POINTS.get(employment_status or "", 0)


def education_points(field_of_study: Optional[str], loan_purpose: Optional[str]) -> int:
    points = EDUCATION_BASE_POINTS
    if field_of_study in HIGH_DEMAND_FIELDS:
        points += HIGH_DEMAND_BONUS
    if loan_purpose == "upskilling":
        points += UPSKILLING_BONUS
    return min(points, MAX_EDUCATION_POINTS)


def determine_credit_tier(score: int) -> CreditTier:
    if score >= 80:
        return CreditTier.EXCELLENT
    elif score >= 65:
        return CreditTier.GOOD
    elif score >= 45:
        return CreditTier.FAIR
    else:
        return CreditTier.NEEDS_IMPROVEMENT


def _percent(points: int, maximum: int) -> int:
    return int(round_half_up(points / maximum * 100))


def improvement_tips(profile: ApplicantProfile, factors: CreditFactors) -> List[str]:
    """
    Up to four tips, weakest factor first.

    Factor tips (income, employment, co-signer) are ranked by how far the
    factor fell short; credit-history and institution tips follow. The
    multiple-lenders tip is always included, plus a positive note when it
    would otherwise be the only tip.
    """
    ranked = []
    if income_points(profile.income_range) < 25:
        ranked.append((factors.income, TIP_INCOME))
    if employment_points(profile.employment_status) < 25:
        ranked.append((factors.employment, TIP_EMPLOYMENT))
    if not profile.has_co_signer:
        ranked.append((factors.co_signer, TIP_CO_SIGNER))
    tips = [tip for _, tip in sorted(ranked, key=lambda item: item[0])]

    if profile.credit_history in ("none", "limited"):
        tips.append(TIP_CREDIT_HISTORY)
    if not profile.institution:
        tips.append(TIP_INSTITUTION)

    tips = tips[: MAX_TIPS - 1]
    tips.append(TIP_MULTIPLE_LENDERS)
    if len(tips) == 1:
        tips.append(TIP_STRONG_PROFILE)
    return tips


def calculate_credit_readiness(profile: ApplicantProfile) -> CreditScore:
    """
    Score components:
    - income:     0-40 by income bracket
    - employment: 0-30 by employment status
    - education:  5 base, +3 high-demand field, +2 upskilling (max 10)
    - co-signer:  flat 20

    Tiers: 80+ excellent, 65+ good, 45+ fair, else needs-improvement.
    """
    income = income_points(profile.income_range)
    employment = employment_points(profile.employment_status)
    education = education_points(profile.field_of_study, profile.loan_purpose)
    co_signer = CO_SIGNER_POINTS if profile.has_co_signer else 0

    score = min(100, income + employment + education + co_signer)
    factors = CreditFactors(
        income=_percent(income, MAX_INCOME_POINTS),
        employment=_percent(employment, MAX_EMPLOYMENT_POINTS),
        education=_percent(education, MAX_EDUCATION_POINTS),
        co_signer=_percent(co_signer, CO_SIGNER_POINTS),
    )

    return CreditScore(
        score=score,
        tier=determine_credit_tier(score),
        factors=factors,
        tips=improvement_tips(profile, factors),
    )
