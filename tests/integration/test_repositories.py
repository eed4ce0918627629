"""Integration tests for the SQLAlchemy repositories"""

from datetime import datetime, timezone
from techscale_underwriting.domain.models import OfferStatus, RuleType, UnderwritingRule
from techscale_underwriting.domain.offers import generate_offer
from techscale_underwriting.domain.underwriting import UnderwritingEngine
from techscale_underwriting.infrastructure.database.repositories import (
    AssessmentRepository,
    OfferRepository,
    RuleRepository,
)

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


def test_get_active_rules_skips_inactive(db):
    repo = RuleRepository(db)
    repo.create_rule(UnderwritingRule(rule_name="Income floor", rule_type=RuleType.INCOME))
    repo.create_rule(UnderwritingRule(rule_name="Retired", rule_type=RuleType.CREDIT, active=False))
    db.commit()

    rules = repo.get_active_rules()

    assert [rule.rule_name for rule in rules] == ["Income floor"]
    assert rules[0].rule_type == RuleType.INCOME
    assert rules[0].id is not None
    assert len(repo.list_rules()) == 2


def test_assessment_and_offer_round_trip(db, strong_application):
    engine = UnderwritingEngine([UnderwritingRule(rule_name="Baseline", rule_type=RuleType.INCOME)])
    assessment = engine.assess(strong_application)
    offer = generate_offer(strong_application, assessment, NOW)

    db_assessment = AssessmentRepository(db).create_assessment("app_1", "user_1", assessment)
    db_offer = OfferRepository(db).create_offer(db_assessment.id, "app_1", "user_1", offer)
    db.commit()

    stored = OfferRepository(db).get_offer_by_id(db_offer.id)
    assert stored.assessment_id == db_assessment.id
    assert stored.offer_type == "loan"
    assert stored.loan_amount == offer.loan_amount
    assert stored.status == "pending"
    assert stored.repayment_schedule["first_payment_date"] == "2025-09-10"
    assert stored.repayment_schedule["installments"][0]["due_date"] == "2025-09-10"
    assert stored.terms_and_conditions["benefits"] == offer.terms_and_conditions.benefits

    history = AssessmentRepository(db).get_assessments_by_user("user_1")
    assert len(history) == 1
    assert history[0].risk_score == assessment.risk_score
    assert history[0].assessment_data["rules_applied"] == ["Baseline"]


def test_update_status_stamps_timestamp(db, strong_application):
    engine = UnderwritingEngine([UnderwritingRule(rule_name="Baseline", rule_type=RuleType.INCOME)])
    assessment = engine.assess(strong_application)
    offer = generate_offer(strong_application, assessment, NOW)
    db_assessment = AssessmentRepository(db).create_assessment("app_1", "user_1", assessment)
    repo = OfferRepository(db)
    db_offer = repo.create_offer(db_assessment.id, "app_1", "user_1", offer)

    repo.update_status(db_offer, OfferStatus.DECLINED, NOW)
    db.commit()

    stored = repo.get_offer_by_id(db_offer.id)
    assert stored.status == "declined"
    assert stored.declined_at is not None
    assert stored.accepted_at is None
