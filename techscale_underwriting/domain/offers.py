"""Offer generation - turns a risk assessment into a priced loan, ISA or hybrid offer"""

from datetime import datetime, timedelta
from typing import Optional
from techscale_underwriting.domain.exceptions import OfferStatusError
from techscale_underwriting.domain.installments import amortized_payment, generate_amortization_schedule
from techscale_underwriting.domain.models import (
    Decision,
    LoanApplication,
    LoanOffer,
    OfferStatus,
    OfferType,
    RepaymentSchedule,
    RiskAssessment,
    RiskTier,
    TermsAndConditions,
)
from techscale_underwriting.utils.date_utils import add_months, ensure_utc, utc_now
from techscale_underwriting.utils.numbers import parse_amount, round_half_up

OFFER_VALIDITY_DAYS = 14
DEFAULT_REQUESTED_AMOUNT = 10_000.0
MIN_AFFORDABILITY_MULTIPLIER = 0.5

AMOUNT_CAPS = {
    RiskTier.HIGH: 15_000.0,
    RiskTier.MEDIUM: 35_000.0,
    RiskTier.LOW: 50_000.0,
}

LOAN_BASE_APR = {
    RiskTier.LOW: 6.5,
    RiskTier.MEDIUM: 9.5,
    RiskTier.HIGH: 12.5,
}
APR_PIVOT_SCORE = 80
APR_STEP_PER_POINT = 0.05

LOAN_TERM_MONTHS = {
    RiskTier.LOW: 36,
    RiskTier.MEDIUM: 48,
    RiskTier.HIGH: 60,
}

ISA_PERCENTAGE = {
    RiskTier.LOW: 8.0,
    RiskTier.MEDIUM: 10.0,
    RiskTier.HIGH: 12.0,
}
ISA_TERM_MONTHS = 60
ISA_GRACE_MONTHS = 6
ISA_PAYMENT_CAP_MULTIPLIER = 1.5
ISA_MINIMUM_INCOME_THRESHOLD = 25_000.0

HYBRID_LOAN_SHARE = 0.6
HYBRID_TERM_MONTHS = 48
HYBRID_GRACE_MONTHS = 6

COMMON_CONDITIONS = [
    "No origination fee",
    "No prepayment penalty",
    "Late payments incur a 5% fee after a 15-day grace period",
]

# Offer-status transitions recorded on behalf of the applicant
ALLOWED_TRANSITIONS = {
    OfferStatus.PENDING: {OfferStatus.ACCEPTED, OfferStatus.DECLINED},
}


def parse_requested_amount(amount_text: Optional[str]) -> float:
    """First numeric run of the free-text amount; 10,000 when missing or non-positive"""
    amount = parse_amount(amount_text)
    if amount is None or amount <= 0:
        return DEFAULT_REQUESTED_AMOUNT
    return amount


def cap_offer_amount(requested: float, risk_tier: RiskTier, affordability_score: float) -> float:
    """
    Cap by tier then apply the affordability haircut.

    amount = round(min(requested, cap) × max(0.5, affordability / 100)),
    never more than min(requested, cap)

    Example: £100,000 requested, high tier, affordability 40
        → round(15,000 × 0.5) = 7,500
    """
    capped = min(requested, AMOUNT_CAPS[risk_tier])
    multiplier = max(MIN_AFFORDABILITY_MULTIPLIER, affordability_score / 100)
    # Rounding up must not push a fractional request past itself
    return min(capped, round_half_up(capped * multiplier))


def select_offer_type(loan_type: str, risk_tier: RiskTier) -> OfferType:
    """
    - career-microloan or high tier → ISA
    - low tier                      → loan
    - everything else               → hybrid
    """
    if loan_type == "career-microloan" or risk_tier == RiskTier.HIGH:
        return OfferType.ISA
    if risk_tier == RiskTier.LOW:
        return OfferType.LOAN
    return OfferType.HYBRID


def calculate_loan_apr(risk_tier: RiskTier, risk_score: float) -> float:
    """Tier base rate fine-tuned by 0.05 points per score point away from 80"""
    apr = LOAN_BASE_APR[risk_tier] + (APR_PIVOT_SCORE - risk_score) * APR_STEP_PER_POINT
    return round_half_up(apr, 1)


def _loan_offer_terms(grace_months: int) -> TermsAndConditions:
    return TermsAndConditions(
        eligibility_requirements=[
            "Proof of enrolment or acceptance at the named institution",
            "Verified identity and proof of residence",
            "UK bank account for monthly repayments",
        ],
        special_conditions=COMMON_CONDITIONS
        + [
            "Fixed interest rate for the full term",
            f"Repayments start after a {grace_months}-month grace period",
        ],
        benefits=[
            "Predictable fixed monthly payments",
            "Early repayment allowed at any time",
        ],
    )


def _isa_offer_terms(amount: float, grace_months: int) -> TermsAndConditions:
    payment_cap = round_half_up(amount * ISA_PAYMENT_CAP_MULTIPLIER, 2)
    return TermsAndConditions(
        eligibility_requirements=[
            "Proof of enrolment or acceptance at the named institution",
            "Verified identity and proof of residence",
            "Annual income verification and employment status updates",
        ],
        special_conditions=COMMON_CONDITIONS
        + [
            f"No payments while income is below £{ISA_MINIMUM_INCOME_THRESHOLD:,.0f} a year",
            f"Total payments capped at £{payment_cap:,.2f} (1.5× the amount funded)",
            f"Payments start after a {grace_months}-month grace period",
        ],
        benefits=[
            "Payments scale with your income",
            "No fixed monthly payment during unemployment",
        ],
    )


def _hybrid_offer_terms(amount: float, grace_months: int) -> TermsAndConditions:
    payment_cap = round_half_up(amount * (1 - HYBRID_LOAN_SHARE) * ISA_PAYMENT_CAP_MULTIPLIER, 2)
    return TermsAndConditions(
        eligibility_requirements=[
            "Proof of enrolment or acceptance at the named institution",
            "Verified identity and proof of residence",
            "UK bank account for monthly repayments",
            "Annual income verification for the income-share portion",
        ],
        special_conditions=COMMON_CONDITIONS
        + [
            "60% of the amount is a fixed-rate loan, 40% an income share agreement",
            f"Income-share payments capped at £{payment_cap:,.2f}",
            f"Repayments start after a {grace_months}-month grace period",
        ],
        benefits=[
            "Lower fixed monthly payment than a full loan",
            "Income-linked flexibility on part of the funding",
        ],
    )


def _build_loan(amount: float, assessment: RiskAssessment, today) -> dict:
    tier = assessment.risk_tier
    apr = calculate_loan_apr(tier, assessment.risk_score)
    term = LOAN_TERM_MONTHS[tier]
    grace = 6 if tier == RiskTier.LOW else 3
    first_payment = add_months(today, grace)

    monthly = round_half_up(amortized_payment(amount, apr, term))
    total = round_half_up(monthly * term, 2)

    schedule = RepaymentSchedule(
        schedule_type="fixed_monthly",
        first_payment_date=first_payment,
        monthly_payment=monthly,
        total_repayment=total,
        total_payments=term,
        installments=generate_amortization_schedule(amount, apr, term, monthly, first_payment),
    )
    return dict(
        apr_rate=apr,
        isa_percentage=None,
        repayment_term_months=term,
        grace_period_months=grace,
        monthly_payment=monthly,
        total_repayment=total,
        repayment_schedule=schedule,
        terms_and_conditions=_loan_offer_terms(grace),
    )


def _build_isa(amount: float, assessment: RiskAssessment, today) -> dict:
    percentage = ISA_PERCENTAGE[assessment.risk_tier]
    schedule = RepaymentSchedule(
        schedule_type="income_share",
        first_payment_date=add_months(today, ISA_GRACE_MONTHS),
        total_payments=ISA_TERM_MONTHS,
        payment_cap=round_half_up(amount * ISA_PAYMENT_CAP_MULTIPLIER, 2),
        minimum_income_threshold=ISA_MINIMUM_INCOME_THRESHOLD,
    )
    return dict(
        apr_rate=None,
        isa_percentage=percentage,
        repayment_term_months=ISA_TERM_MONTHS,
        grace_period_months=ISA_GRACE_MONTHS,
        monthly_payment=None,
        total_repayment=None,
        repayment_schedule=schedule,
        terms_and_conditions=_isa_offer_terms(amount, ISA_GRACE_MONTHS),
    )


def _build_hybrid(amount: float, assessment: RiskAssessment, today) -> dict:
    tier = assessment.risk_tier
    loan_portion = round_half_up(amount * HYBRID_LOAN_SHARE)
    isa_portion = round_half_up(amount - loan_portion, 2)
    apr = round_half_up(calculate_loan_apr(tier, assessment.risk_score) + 1, 1)
    percentage = ISA_PERCENTAGE[tier] - 1
    first_payment = add_months(today, HYBRID_GRACE_MONTHS)

    monthly = round_half_up(amortized_payment(loan_portion, apr, HYBRID_TERM_MONTHS))
    total = round_half_up(monthly * HYBRID_TERM_MONTHS, 2)

    schedule = RepaymentSchedule(
        schedule_type="hybrid",
        first_payment_date=first_payment,
        monthly_payment=monthly,
        total_repayment=total,
        total_payments=HYBRID_TERM_MONTHS,
        payment_cap=round_half_up(isa_portion * ISA_PAYMENT_CAP_MULTIPLIER, 2),
        minimum_income_threshold=ISA_MINIMUM_INCOME_THRESHOLD,
        loan_portion=loan_portion,
        isa_portion=isa_portion,
        installments=generate_amortization_schedule(
            loan_portion, apr, HYBRID_TERM_MONTHS, monthly, first_payment
        ),
    )
    return dict(
        apr_rate=apr,
        isa_percentage=percentage,
        repayment_term_months=HYBRID_TERM_MONTHS,
        grace_period_months=HYBRID_GRACE_MONTHS,
        monthly_payment=monthly,
        total_repayment=total,
        repayment_schedule=schedule,
        terms_and_conditions=_hybrid_offer_terms(amount, HYBRID_GRACE_MONTHS),
    )


_BUILDERS = {
    OfferType.LOAN: _build_loan,
    OfferType.ISA: _build_isa,
    OfferType.HYBRID: _build_hybrid,
}


def generate_offer(
    application: LoanApplication,
    assessment: RiskAssessment,
    now: Optional[datetime] = None,
) -> Optional[LoanOffer]:
    """
    Main entry point: price an offer for an assessed application.

    Returns None for declined assessments. Deterministic apart from the
    creation timestamp, which can be pinned with `now`.
    """
    if assessment.decision == Decision.DECLINE:
        return None

    created_at = now or utc_now()
    requested = parse_requested_amount(application.loan_type_request.amount)
    amount = cap_offer_amount(requested, assessment.risk_tier, assessment.affordability.score)
    offer_type = select_offer_type(application.loan_type_request.type, assessment.risk_tier)

    terms = _BUILDERS[offer_type](amount, assessment, created_at.date())

    return LoanOffer(
        offer_type=offer_type,
        requested_amount=requested,
        loan_amount=amount,
        created_at=created_at,
        offer_valid_until=created_at + timedelta(days=OFFER_VALIDITY_DAYS),
        status=OfferStatus.PENDING,
        **terms,
    )


def transition_offer_status(
    current: OfferStatus,
    target: OfferStatus,
    valid_until: datetime,
    now: Optional[datetime] = None,
) -> OfferStatus:
    """
    Validate an applicant's accept/decline of an offer.

    Only pending offers can move, and only to accepted or declined. A pending
    offer past its expiry cannot be answered.

    Raises:
        OfferStatusError: transition not allowed or offer expired
    """
    now = ensure_utc(now or utc_now())
    valid_until = ensure_utc(valid_until)
    if current == OfferStatus.PENDING and now > valid_until:
        raise OfferStatusError("Offer has expired")
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise OfferStatusError(f"Cannot move offer from {current.value} to {target.value}")
    return target


def effective_offer_status(current: OfferStatus, valid_until: datetime, now: Optional[datetime] = None) -> OfferStatus:
    """Pending offers past their validity window read as expired"""
    now = ensure_utc(now or utc_now())
    valid_until = ensure_utc(valid_until)
    if current == OfferStatus.PENDING and now > valid_until:
        return OfferStatus.EXPIRED
    return current
