"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field
from techscale_underwriting.domain.models import (
    LoanApplication,
    RuleType,
    Sponsor,
)


class UnderwritingRequest(BaseModel):
    """Request body for POST /v1/underwriting"""

    application_id: str = Field(..., min_length=1, description="Application identifier")
    user_id: str = Field(..., min_length=1, description="Applicant identifier")
    application: LoanApplication


class ScoreDetailSchema(BaseModel):
    score: int
    details: str


class AssessmentSchema(BaseModel):
    assessment_id: str
    risk_score: int = Field(..., ge=0, le=100)
    risk_tier: str
    decision: str
    affordability: ScoreDetailSchema
    education: ScoreDetailSchema
    employment: ScoreDetailSchema
    sponsor: ScoreDetailSchema
    factors: Dict[str, List[str]]
    rules_applied: List[str]


class TermsAndConditionsSchema(BaseModel):
    eligibility_requirements: List[str]
    special_conditions: List[str]
    benefits: List[str]


class OfferSchema(BaseModel):
    """Offer as stored; field names match the document exporter's contract"""

    offer_id: str
    assessment_id: str
    application_id: str
    offer_type: str
    loan_amount: float
    apr_rate: Optional[float] = None
    isa_percentage: Optional[float] = None
    repayment_term_months: int
    grace_period_months: int
    monthly_payment: Optional[float] = None
    total_repayment: Optional[float] = None
    repayment_schedule: Dict[str, Any]
    terms_and_conditions: TermsAndConditionsSchema
    offer_valid_until: datetime
    status: str
    created_at: datetime


class UnderwritingResponse(BaseModel):
    """Response for POST /v1/underwriting"""

    application_id: str
    application_status: str
    assessment: AssessmentSchema
    offer: Optional[OfferSchema] = None


class OfferStatusRequest(BaseModel):
    """Applicant's answer to an offer"""

    status: Literal["accepted", "declined"]


class AssessmentHistoryItem(BaseModel):
    assessment_id: str
    application_id: str
    risk_score: int
    risk_tier: str
    decision: str
    created_at: str


class AssessmentHistoryResponse(BaseModel):
    """Response for GET /v1/assessments/history"""

    user_id: str
    assessments: List[AssessmentHistoryItem]


class CreditFactorsSchema(BaseModel):
    income: int
    employment: int
    education: int
    co_signer: int


class CreditScoreResponse(BaseModel):
    """Response for POST /v1/credit-readiness"""

    score: int = Field(..., ge=0, le=100)
    tier: str
    factors: CreditFactorsSchema
    tips: List[str]


class LenderOptionSchema(BaseModel):
    lender_id: str
    lender_name: str
    apr_range: str
    max_amount: str
    repayment_term: str
    co_signer_required: bool
    grace_period: str
    eligibility_tier: str
    features: List[str]
    description: str
    processing_time: str
    special_offers: Optional[str] = None


class LenderMatchResponse(BaseModel):
    """Response for POST /v1/lender-matches"""

    lenders: List[LenderOptionSchema]


class SponsorMatchRequest(BaseModel):
    """Request body for POST /v1/sponsor-match"""

    application: LoanApplication
    sponsors: List[Sponsor] = Field(default_factory=list)
    user_id: Optional[str] = None
    application_id: Optional[str] = None


class SponsorMatchSchema(BaseModel):
    sponsor_id: str
    sponsor_name: str
    match_score: int = Field(..., ge=0, le=100)
    reason: str
    funding_available: float
    expertise: List[str]


class SponsorMatchResponse(BaseModel):
    match: Optional[SponsorMatchSchema] = None


class RuleCreateRequest(BaseModel):
    rule_name: str = Field(..., min_length=1)
    rule_type: RuleType
    conditions: Dict[str, Any] = Field(default_factory=dict)
    weight: float = Field(1.0, ge=0)
    active: bool = True


class RuleSchema(BaseModel):
    rule_id: str
    rule_name: str
    rule_type: str
    conditions: Dict[str, Any]
    weight: float
    active: bool


class RuleListResponse(BaseModel):
    """Response for GET /v1/rules"""

    rules: List[RuleSchema]


def score_detail_schema(detail) -> ScoreDetailSchema:
    return ScoreDetailSchema(score=detail.score, details=detail.details)


def offer_schema_from_record(record) -> OfferSchema:
    """Build the response from the stored row so POST and GET return identical shapes"""
    return OfferSchema(
        offer_id=str(record.id),
        assessment_id=str(record.assessment_id),
        application_id=record.application_id,
        offer_type=record.offer_type,
        loan_amount=record.loan_amount,
        apr_rate=record.apr_rate,
        isa_percentage=record.isa_percentage,
        repayment_term_months=record.repayment_term_months,
        grace_period_months=record.grace_period_months,
        monthly_payment=record.monthly_payment,
        total_repayment=record.total_repayment,
        repayment_schedule=record.repayment_schedule,
        terms_and_conditions=TermsAndConditionsSchema(**record.terms_and_conditions),
        offer_valid_until=record.offer_valid_until,
        status=record.status,
        created_at=record.created_at,
    )
