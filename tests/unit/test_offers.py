"""Unit tests for offer generation and offer status changes"""

import pytest
from datetime import date, datetime, timedelta, timezone
from techscale_underwriting.domain.exceptions import OfferStatusError
from techscale_underwriting.domain.installments import amortized_payment
from techscale_underwriting.domain.models import (
    Decision,
    LoanApplication,
    LoanTypeRequest,
    OfferStatus,
    OfferType,
    RiskAssessment,
    RiskTier,
    ScoreDetail,
)
from techscale_underwriting.domain.offers import (
    calculate_loan_apr,
    cap_offer_amount,
    effective_offer_status,
    generate_offer,
    parse_requested_amount,
    select_offer_type,
    transition_offer_status,
)
from techscale_underwriting.utils.date_utils import add_months

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


def make_assessment(risk_score: int, tier: RiskTier, decision: Decision, affordability: int) -> RiskAssessment:
    return RiskAssessment(
        risk_score=risk_score,
        risk_tier=tier,
        decision=decision,
        affordability=ScoreDetail(score=affordability, details="income"),
        education=ScoreDetail(score=80, details="education"),
        employment=ScoreDetail(score=70, details="employment"),
        sponsor=ScoreDetail(score=100, details="personal info"),
    )


def make_application(loan_type: str, amount: str) -> LoanApplication:
    return LoanApplication(loan_type_request=LoanTypeRequest(type=loan_type, amount=amount))


def test_cap_offer_amount_high_tier_haircut():
    """round(min(100000, 15000) × max(0.5, 0.4)) = 7500"""
    assert cap_offer_amount(100000, RiskTier.HIGH, 40) == 7500


def test_cap_offer_amount_never_exceeds_request():
    assert cap_offer_amount(20000, RiskTier.MEDIUM, 90) == 18000
    assert cap_offer_amount(5000, RiskTier.LOW, 100) == 5000


def test_cap_offer_amount_fractional_request_not_rounded_up():
    assert cap_offer_amount(100.5, RiskTier.LOW, 100) == 100.5

    application = make_application("study-abroad", "£12,500.50")
    offer = generate_offer(application, make_assessment(85, RiskTier.LOW, Decision.AUTO_APPROVE, 100), NOW)

    assert offer.requested_amount == 12500.5
    assert offer.loan_amount == 12500.5


@pytest.mark.parametrize(
    "tier,cap",
    [(RiskTier.HIGH, 15000), (RiskTier.MEDIUM, 35000), (RiskTier.LOW, 50000)],
)
def test_cap_offer_amount_tier_caps(tier, cap):
    assert cap_offer_amount(1_000_000, tier, 100) == cap


@pytest.mark.parametrize(
    "text,expected",
    [
        ("£25,000", 25000),
        ("about 12k for fees", 12000),
        ("15000.50", 15000.5),
        ("", 10000),
        (None, 10000),
        ("0", 10000),
        ("not sure yet", 10000),
    ],
)
def test_parse_requested_amount(text, expected):
    assert parse_requested_amount(text) == expected


@pytest.mark.parametrize(
    "loan_type,tier,offer_type",
    [
        ("career-microloan", RiskTier.LOW, OfferType.ISA),
        ("career-microloan", RiskTier.MEDIUM, OfferType.ISA),
        ("study-abroad", RiskTier.HIGH, OfferType.ISA),
        ("study-abroad", RiskTier.LOW, OfferType.LOAN),
        ("sponsor-match", RiskTier.LOW, OfferType.LOAN),
        ("study-abroad", RiskTier.MEDIUM, OfferType.HYBRID),
        ("", RiskTier.MEDIUM, OfferType.HYBRID),
    ],
)
def test_select_offer_type_table(loan_type, tier, offer_type):
    assert select_offer_type(loan_type, tier) == offer_type


def test_calculate_loan_apr():
    assert calculate_loan_apr(RiskTier.LOW, 80) == 6.5
    assert calculate_loan_apr(RiskTier.MEDIUM, 60) == 10.5
    assert calculate_loan_apr(RiskTier.HIGH, 40) == 14.5


def test_declined_assessment_gets_no_offer():
    assessment = make_assessment(20, RiskTier.HIGH, Decision.DECLINE, 10)
    assert generate_offer(make_application("study-abroad", "£20,000"), assessment, NOW) is None


def test_generate_loan_offer():
    assessment = make_assessment(80, RiskTier.LOW, Decision.AUTO_APPROVE, 85)
    offer = generate_offer(make_application("study-abroad", "£20,000"), assessment, NOW)

    assert offer.offer_type == OfferType.LOAN
    assert offer.requested_amount == 20000
    assert offer.loan_amount == 17000
    assert offer.apr_rate == 6.5
    assert offer.isa_percentage is None
    assert offer.repayment_term_months == 36
    assert offer.grace_period_months == 6
    assert offer.monthly_payment == round(amortized_payment(17000, 6.5, 36))
    assert offer.total_repayment == offer.monthly_payment * 36
    assert offer.status == OfferStatus.PENDING

    schedule = offer.repayment_schedule
    assert schedule.schedule_type == "fixed_monthly"
    assert schedule.first_payment_date == date(2025, 9, 10)
    assert len(schedule.installments) == 36
    assert sum(i.principal for i in schedule.installments) == pytest.approx(17000, abs=0.01)


def test_offer_expires_14_days_after_creation():
    assessment = make_assessment(80, RiskTier.LOW, Decision.AUTO_APPROVE, 85)
    offer = generate_offer(make_application("study-abroad", "£20,000"), assessment, NOW)

    assert offer.created_at == NOW
    assert offer.offer_valid_until == NOW + timedelta(days=14)


def test_generate_isa_offer_for_high_tier():
    assessment = make_assessment(40, RiskTier.HIGH, Decision.MANUAL_REVIEW, 25)
    offer = generate_offer(make_application("study-abroad", "£100,000"), assessment, NOW)

    assert offer.offer_type == OfferType.ISA
    assert offer.loan_amount == 7500
    assert offer.isa_percentage == 12.0
    assert offer.apr_rate is None
    assert offer.monthly_payment is None
    assert offer.repayment_term_months == 60
    assert offer.grace_period_months == 6
    assert offer.repayment_schedule.payment_cap == 11250
    assert offer.repayment_schedule.minimum_income_threshold == 25000
    assert offer.repayment_schedule.installments == []


def test_generate_isa_offer_for_career_microloan():
    assessment = make_assessment(85, RiskTier.LOW, Decision.AUTO_APPROVE, 100)
    offer = generate_offer(make_application("career-microloan", "£4,000"), assessment, NOW)

    assert offer.offer_type == OfferType.ISA
    assert offer.isa_percentage == 8.0
    assert offer.loan_amount == 4000


def test_generate_hybrid_offer():
    assessment = make_assessment(60, RiskTier.MEDIUM, Decision.MANUAL_REVIEW, 70)
    offer = generate_offer(make_application("study-abroad", "£20,000"), assessment, NOW)

    assert offer.offer_type == OfferType.HYBRID
    assert offer.loan_amount == 14000
    assert offer.apr_rate == 11.5
    assert offer.isa_percentage == 9.0
    assert offer.repayment_term_months == 48
    assert offer.grace_period_months == 6

    schedule = offer.repayment_schedule
    assert schedule.loan_portion == 8400
    assert schedule.isa_portion == 5600
    assert schedule.payment_cap == 8400
    assert offer.monthly_payment == round(amortized_payment(8400, 11.5, 48))
    assert schedule.first_payment_date == add_months(NOW.date(), 6)


def test_loan_apr_rises_below_pivot_score():
    """Low tier at 78: 6.5 + 2 × 0.05 = 6.6"""
    assessment = make_assessment(78, RiskTier.LOW, Decision.MANUAL_REVIEW, 60)
    offer = generate_offer(make_application("study-abroad", "£10,000"), assessment, NOW)

    assert offer.offer_type == OfferType.LOAN
    assert offer.grace_period_months == 6
    assert offer.apr_rate == 6.6


def test_offer_terms_carry_common_conditions():
    assessment = make_assessment(60, RiskTier.MEDIUM, Decision.MANUAL_REVIEW, 70)
    offer = generate_offer(make_application("study-abroad", "£20,000"), assessment, NOW)

    terms = offer.terms_and_conditions
    assert "No prepayment penalty" in terms.special_conditions
    assert terms.eligibility_requirements
    assert terms.benefits


def test_generate_offer_is_deterministic_for_fixed_clock():
    assessment = make_assessment(60, RiskTier.MEDIUM, Decision.MANUAL_REVIEW, 70)
    application = make_application("study-abroad", "£20,000")
    assert generate_offer(application, assessment, NOW) == generate_offer(application, assessment, NOW)


def test_transition_pending_offer():
    valid_until = NOW + timedelta(days=14)
    assert transition_offer_status(OfferStatus.PENDING, OfferStatus.ACCEPTED, valid_until, NOW) == OfferStatus.ACCEPTED
    assert transition_offer_status(OfferStatus.PENDING, OfferStatus.DECLINED, valid_until, NOW) == OfferStatus.DECLINED


def test_transition_from_answered_offer_rejected():
    valid_until = NOW + timedelta(days=14)
    with pytest.raises(OfferStatusError):
        transition_offer_status(OfferStatus.ACCEPTED, OfferStatus.DECLINED, valid_until, NOW)
    with pytest.raises(OfferStatusError):
        transition_offer_status(OfferStatus.PENDING, OfferStatus.PENDING, valid_until, NOW)


def test_transition_expired_offer_rejected():
    valid_until = NOW - timedelta(seconds=1)
    with pytest.raises(OfferStatusError, match="expired"):
        transition_offer_status(OfferStatus.PENDING, OfferStatus.ACCEPTED, valid_until, NOW)


def test_effective_offer_status():
    expired_at = NOW - timedelta(days=1)

    assert effective_offer_status(OfferStatus.PENDING, expired_at, NOW) == OfferStatus.EXPIRED
    assert effective_offer_status(OfferStatus.ACCEPTED, expired_at, NOW) == OfferStatus.ACCEPTED
    assert effective_offer_status(OfferStatus.PENDING, NOW + timedelta(days=1), NOW) == OfferStatus.PENDING


def test_effective_offer_status_accepts_naive_timestamps():
    naive_expiry = datetime(2025, 3, 1, 12, 0)
    assert effective_offer_status(OfferStatus.PENDING, naive_expiry, NOW) == OfferStatus.EXPIRED
