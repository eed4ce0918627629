"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Decision(str, Enum):
    AUTO_APPROVE = "auto-approve"
    MANUAL_REVIEW = "manual-review"
    DECLINE = "decline"


class OfferType(str, Enum):
    LOAN = "loan"
    ISA = "isa"
    HYBRID = "hybrid"


class OfferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class RuleType(str, Enum):
    INCOME = "income"
    EDUCATION = "education"
    EMPLOYMENT = "employment"
    CREDIT = "credit"
    SPONSOR = "sponsor"


class ApplicationStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under-review"
    APPROVED = "approved"
    REJECTED = "rejected"


class CreditTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEEDS_IMPROVEMENT = "needs-improvement"


class EligibilityTier(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class NotificationType(str, Enum):
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_STATUS_CHANGE = "application_status_change"
    OFFER_AVAILABLE = "offer_available"
    DOCUMENT_VERIFIED = "document_verified"
    DOCUMENT_REJECTED = "document_rejected"


# --- Loan application (collected by the multi-step application form) ---


@dataclass
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""


@dataclass
class PersonalInfo:
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    gender: str = ""
    nationality: str = ""
    address: Address = field(default_factory=Address)
    phone: str = ""
    email: str = ""


@dataclass
class DocumentRef:
    """Pointer to an uploaded document held by the storage service"""

    uploaded: bool = False
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    verified: Optional[bool] = None


@dataclass
class KycDocuments:
    passport_id: DocumentRef = field(default_factory=DocumentRef)
    proof_of_residence: DocumentRef = field(default_factory=DocumentRef)


@dataclass
class CurrentEmployment:
    company: str = ""
    position: str = ""
    start_date: str = ""
    salary: str = ""


@dataclass
class EducationCareer:
    highest_qualification: str = ""
    institution: str = ""
    graduation_year: str = ""
    current_employment: Optional[CurrentEmployment] = None


@dataclass
class ProfessionalEmployment:
    """Employment section used by career-microloan and sponsor-match applications"""

    employment_type: str = ""  # full-time | part-time | self-employed | contract | unemployed
    company: str = ""
    job_title: str = ""
    employment_duration: str = ""
    monthly_salary: str = ""


@dataclass
class ProgramInfo:
    institution: str = ""
    program_name: str = ""
    field_of_study: str = ""
    country: str = ""  # destination country of the institution
    duration: str = ""
    start_date: str = ""
    total_cost: str = ""


@dataclass
class FinancialInfo:
    household_income: str = ""  # bucket label ("50k-100k") or free text ("£60,000")
    dependents: int = 0
    existing_loans: str = ""
    other_income: str = ""


@dataclass
class LoanTypeRequest:
    type: str = ""  # study-abroad | career-microloan | sponsor-match
    amount: str = ""  # free text, e.g. "£25,000"
    purpose: str = ""
    repayment_preference: str = ""


@dataclass
class Declarations:
    credit_check_consent: bool = False
    data_privacy_consent: bool = False
    terms_and_conditions: bool = False
    marketing_consent: bool = False
    signature_date: str = ""


@dataclass
class LoanApplication:
    """Read-only snapshot of a submitted application"""

    personal_info: Optional[PersonalInfo] = None
    kyc_documents: KycDocuments = field(default_factory=KycDocuments)
    education_career: Optional[EducationCareer] = None
    professional_employment: Optional[ProfessionalEmployment] = None
    program_info: ProgramInfo = field(default_factory=ProgramInfo)
    financial_info: FinancialInfo = field(default_factory=FinancialInfo)
    loan_type_request: LoanTypeRequest = field(default_factory=LoanTypeRequest)
    declarations: Declarations = field(default_factory=Declarations)
    status: ApplicationStatus = ApplicationStatus.SUBMITTED


@dataclass
class ApplicantProfile:
    """Pre-application profile captured by the intake form"""

    income_range: str = ""  # under-10k | 10k-25k | 25k-50k | 50k-100k | over-100k
    employment_status: str = ""
    field_of_study: str = ""
    has_co_signer: bool = False
    credit_history: str = ""  # excellent | good | fair | limited | none
    loan_purpose: str = ""  # study-abroad | upskilling | career-development
    country_of_origin: str = ""
    destination: Optional[str] = None
    user_type: str = "student"
    institution: Optional[str] = None
    loan_amount: Optional[str] = None


# --- Underwriting ---


@dataclass
class UnderwritingRule:
    rule_name: str
    rule_type: RuleType
    conditions: Dict[str, Any] = field(default_factory=dict)
    weight: float = 1.0
    active: bool = True
    id: Optional[str] = None


@dataclass
class ScoreDetail:
    """Sub-score (0-100) with the rationale shown to underwriters"""

    score: int
    details: str


@dataclass
class RiskAssessment:
    """Output of risk assessment"""

    risk_score: int
    risk_tier: RiskTier
    decision: Decision
    affordability: ScoreDetail
    education: ScoreDetail
    employment: ScoreDetail
    sponsor: ScoreDetail
    factors: Dict[str, List[str]] = field(default_factory=dict)
    rules_applied: List[str] = field(default_factory=list)


# --- Offers ---


@dataclass
class Installment:
    """Single payment in a repayment plan"""

    due_date: date
    amount: float
    principal: float
    interest: float
    remaining_balance: float


@dataclass
class RepaymentSchedule:
    schedule_type: str  # fixed_monthly | income_share | hybrid
    first_payment_date: date
    monthly_payment: Optional[float] = None
    total_repayment: Optional[float] = None
    total_payments: Optional[int] = None
    payment_cap: Optional[float] = None
    minimum_income_threshold: Optional[float] = None
    loan_portion: Optional[float] = None
    isa_portion: Optional[float] = None
    installments: List[Installment] = field(default_factory=list)


@dataclass
class TermsAndConditions:
    eligibility_requirements: List[str] = field(default_factory=list)
    special_conditions: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)


@dataclass
class LoanOffer:
    """
    Offer derived from exactly one RiskAssessment.

    Field names and units (months, percentages, GBP) are read verbatim by the
    document exporter and must stay stable.
    """

    offer_type: OfferType
    requested_amount: float
    loan_amount: float
    apr_rate: Optional[float]
    isa_percentage: Optional[float]
    repayment_term_months: int
    grace_period_months: int
    monthly_payment: Optional[float]
    total_repayment: Optional[float]
    repayment_schedule: RepaymentSchedule
    terms_and_conditions: TermsAndConditions
    created_at: datetime
    offer_valid_until: datetime
    status: OfferStatus = OfferStatus.PENDING


# --- Sponsors ---


@dataclass
class Sponsor:
    sponsor_id: str
    name: str
    expertise: List[str] = field(default_factory=list)
    countries_supported: List[str] = field(default_factory=list)
    min_funding: float = 0.0
    max_funding: float = 0.0
    career_focus: List[str] = field(default_factory=list)
    current_capacity: int = 0
    active: bool = True


@dataclass
class SponsorMatch:
    sponsor_id: str
    sponsor_name: str
    match_score: int
    reason: str
    funding_available: float
    expertise: List[str] = field(default_factory=list)


# --- Credit readiness and lender matching ---


@dataclass
class CreditFactors:
    """Each factor as a percentage of its maximum contribution"""

    income: int
    employment: int
    education: int
    co_signer: int


@dataclass
class CreditScore:
    score: int
    tier: CreditTier
    factors: CreditFactors
    tips: List[str] = field(default_factory=list)


@dataclass
class LenderOption:
    lender_id: str
    lender_name: str
    apr_range: str
    max_amount: str
    repayment_term: str
    co_signer_required: bool
    grace_period: str
    eligibility_tier: EligibilityTier
    features: List[str] = field(default_factory=list)
    description: str = ""
    processing_time: str = ""
    special_offers: Optional[str] = None


@dataclass
class Notification:
    """Event handed to the notification dispatcher"""

    user_id: str
    type: NotificationType
    data: Dict[str, Any] = field(default_factory=dict)
