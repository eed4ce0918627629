"""Risk assessment engine - combines scoring primitives into a tier and decision"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List
from techscale_underwriting.domain.exceptions import UnderwritingConfigurationError
from techscale_underwriting.domain.models import (
    ApplicationStatus,
    Decision,
    LoanApplication,
    RiskAssessment,
    RiskTier,
    ScoreDetail,
    UnderwritingRule,
)
from techscale_underwriting.domain.scoring import (
    score_education,
    score_employment,
    score_income,
    score_personal_info,
)

# Sub-score weights, must sum to exactly 1.0
WEIGHTS: Dict[str, Decimal] = {
    "affordability": Decimal("0.30"),
    "education": Decimal("0.25"),
    "employment": Decimal("0.25"),
    "sponsor": Decimal("0.20"),
}

LOW_RISK_THRESHOLD = 75
MEDIUM_RISK_THRESHOLD = 50
AUTO_APPROVE_THRESHOLD = 80
DECLINE_THRESHOLD = 35


def weighted_risk_score(
    affordability: int, education: int, employment: int, sponsor: int
) -> int:
    """round(0.30×affordability + 0.25×education + 0.25×employment + 0.20×sponsor), half-up"""
    total = (
        WEIGHTS["affordability"] * affordability
        + WEIGHTS["education"] * education
        + WEIGHTS["employment"] * employment
        + WEIGHTS["sponsor"] * sponsor
    )
    score = int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, score))


def determine_risk_tier(score: float) -> RiskTier:
    """
    Map risk score to tier. Lower bound of each band is inclusive.

    - 75+:   low
    - 50-74: medium
    - <50:   high
    """
    if score >= LOW_RISK_THRESHOLD:
        return RiskTier.LOW
    elif score >= MEDIUM_RISK_THRESHOLD:
        return RiskTier.MEDIUM
    else:
        return RiskTier.HIGH


def make_decision(risk_tier: RiskTier, score: float) -> Decision:
    """
    Decision thresholds are stricter than the tier bands: a low-tier score of
    75-79 and a high-tier score of 35-49 both go to manual review.
    """
    if risk_tier == RiskTier.LOW and score >= AUTO_APPROVE_THRESHOLD:
        return Decision.AUTO_APPROVE
    if risk_tier == RiskTier.HIGH and score < DECLINE_THRESHOLD:
        return Decision.DECLINE
    return Decision.MANUAL_REVIEW


def application_status_for(decision: Decision) -> ApplicationStatus:
    """Application status an underwriting decision moves the application to"""
    if decision == Decision.AUTO_APPROVE:
        return ApplicationStatus.APPROVED
    if decision == Decision.DECLINE:
        return ApplicationStatus.REJECTED
    return ApplicationStatus.UNDER_REVIEW


def resolve_employment_status(application: LoanApplication) -> str:
    """Explicit employment type wins; a populated current job counts as "employed" """
    professional = application.professional_employment
    if professional is not None and professional.employment_type.strip():
        return professional.employment_type

    education = application.education_career
    current = education.current_employment if education is not None else None
    if current is not None and current.company.strip() and current.position.strip():
        return "employed"

    return "unemployed"


def _describe(score: ScoreDetail, strong: str, adequate: str, weak: str) -> str:
    if score.score >= 80:
        return strong
    if score.score >= 60:
        return adequate
    return weak


class UnderwritingEngine:
    """
    Rule-gated risk assessment.

    The engine refuses to start without at least one active rule; once
    constructed, assess() never raises and missing fields degrade to the
    lowest sub-score.
    """

    def __init__(self, rules: Iterable[UnderwritingRule]):
        self.rules: List[UnderwritingRule] = [rule for rule in rules if rule.active]
        if not self.rules:
            raise UnderwritingConfigurationError("No active underwriting rules configured")

    def assess(self, application: LoanApplication) -> RiskAssessment:
        affordability = score_income(application.financial_info.household_income)
        education = score_education(
            application.education_career.highest_qualification
            if application.education_career is not None
            else None
        )
        employment = score_employment(resolve_employment_status(application))
        sponsor = score_personal_info(application.personal_info)

        risk_score = weighted_risk_score(
            affordability.score, education.score, employment.score, sponsor.score
        )
        risk_tier = determine_risk_tier(risk_score)
        decision = make_decision(risk_tier, risk_score)

        return RiskAssessment(
            risk_score=risk_score,
            risk_tier=risk_tier,
            decision=decision,
            affordability=affordability,
            education=education,
            employment=employment,
            sponsor=sponsor,
            factors=self._explain(affordability, education, employment, sponsor),
            rules_applied=[rule.rule_name for rule in self.rules],
        )

    def _explain(
        self,
        affordability: ScoreDetail,
        education: ScoreDetail,
        employment: ScoreDetail,
        sponsor: ScoreDetail,
    ) -> Dict[str, List[str]]:
        return {
            "income": [
                affordability.details,
                _describe(
                    affordability,
                    "Strong income relative to loan amount",
                    "Adequate income for loan size",
                    "Income may be insufficient for requested amount",
                ),
            ],
            "education": [
                education.details,
                _describe(
                    education,
                    "Strong educational background",
                    "Good educational qualifications",
                    "Limited educational credentials",
                ),
            ],
            "employment": [
                employment.details,
                _describe(
                    employment,
                    "Stable employment",
                    "Decent employment situation",
                    "Employment concerns identified",
                ),
            ],
            "credit": ["Credit assessment pending"],
            "sponsor": [sponsor.details],
        }
