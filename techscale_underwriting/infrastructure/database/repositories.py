"""Data access layer for underwriting entities"""

import uuid
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from techscale_underwriting.infrastructure.database.models import (
    AssessmentRecord,
    LoanOfferRecord,
    UnderwritingRuleRecord,
)
from techscale_underwriting.domain.models import (
    LoanOffer,
    OfferStatus,
    RiskAssessment,
    RuleType,
    UnderwritingRule,
)


def to_json(value: Any) -> Any:
    """Convert dataclass dumps to JSON-column friendly values (dates → ISO strings, enums → values)"""
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class RuleRepository:
    """Repository for underwriting rules"""

    def __init__(self, db: Session):
        self.db = db

    def create_rule(self, rule: UnderwritingRule) -> UnderwritingRuleRecord:
        db_rule = UnderwritingRuleRecord(
            rule_name=rule.rule_name,
            rule_type=rule.rule_type.value,
            conditions=rule.conditions,
            weight=rule.weight,
            active=rule.active,
        )
        self.db.add(db_rule)
        self.db.flush()
        return db_rule

    def list_rules(self) -> List[UnderwritingRuleRecord]:
        return self.db.query(UnderwritingRuleRecord).order_by(UnderwritingRuleRecord.created_at).all()

    def get_active_rules(self) -> List[UnderwritingRule]:
        """Active rules as domain objects, in creation order"""
        records = (
            self.db.query(UnderwritingRuleRecord)
            .filter(UnderwritingRuleRecord.active.is_(True))
            .order_by(UnderwritingRuleRecord.created_at)
            .all()
        )
        return [
            UnderwritingRule(
                id=str(r.id),
                rule_name=r.rule_name,
                rule_type=RuleType(r.rule_type),
                conditions=r.conditions or {},
                weight=r.weight,
                active=r.active,
            )
            for r in records
        ]


class AssessmentRepository:
    """Repository for risk assessments"""

    def __init__(self, db: Session):
        self.db = db

    def create_assessment(
        self,
        application_id: str,
        user_id: str,
        assessment: RiskAssessment,
    ) -> AssessmentRecord:
        """Persist assessment to database"""
        db_assessment = AssessmentRecord(
            application_id=application_id,
            user_id=user_id,
            risk_score=assessment.risk_score,
            risk_tier=assessment.risk_tier.value,
            decision=assessment.decision.value,
            affordability_score=assessment.affordability.score,
            education_score=assessment.education.score,
            employment_score=assessment.employment.score,
            sponsor_score=assessment.sponsor.score,
            assessment_data={
                "factors": assessment.factors,
                "details": {
                    "affordability": assessment.affordability.details,
                    "education": assessment.education.details,
                    "employment": assessment.employment.details,
                    "sponsor": assessment.sponsor.details,
                },
                "rules_applied": assessment.rules_applied,
            },
        )
        self.db.add(db_assessment)
        self.db.flush()  # Get ID without committing
        return db_assessment

    def get_assessments_by_user(self, user_id: str, limit: int = 10) -> List[AssessmentRecord]:
        """Fetch recent assessments for a user"""
        return (
            self.db.query(AssessmentRecord)
            .filter(AssessmentRecord.user_id == user_id)
            .order_by(AssessmentRecord.created_at.desc())
            .limit(limit)
            .all()
        )


class OfferRepository:
    """Repository for loan offers"""

    def __init__(self, db: Session):
        self.db = db

    def create_offer(
        self,
        assessment_id: uuid.UUID,
        application_id: str,
        user_id: str,
        offer: LoanOffer,
    ) -> LoanOfferRecord:
        db_offer = LoanOfferRecord(
            assessment_id=assessment_id,
            application_id=application_id,
            user_id=user_id,
            offer_type=offer.offer_type.value,
            loan_amount=offer.loan_amount,
            apr_rate=offer.apr_rate,
            isa_percentage=offer.isa_percentage,
            repayment_term_months=offer.repayment_term_months,
            grace_period_months=offer.grace_period_months,
            monthly_payment=offer.monthly_payment,
            total_repayment=offer.total_repayment,
            repayment_schedule=to_json(asdict(offer.repayment_schedule)),
            terms_and_conditions=to_json(asdict(offer.terms_and_conditions)),
            offer_valid_until=offer.offer_valid_until,
            status=offer.status.value,
            created_at=offer.created_at,
        )
        self.db.add(db_offer)
        self.db.flush()
        return db_offer

    def get_offer_by_id(self, offer_id: uuid.UUID) -> Optional[LoanOfferRecord]:
        return (
            self.db.query(LoanOfferRecord)
            .filter(LoanOfferRecord.id == offer_id)
            .first()
        )

    def update_status(self, db_offer: LoanOfferRecord, status: OfferStatus, at: datetime) -> LoanOfferRecord:
        """Record the applicant's response; accepted_at / declined_at stamped accordingly"""
        db_offer.status = status.value
        if status == OfferStatus.ACCEPTED:
            db_offer.accepted_at = at
        elif status == OfferStatus.DECLINED:
            db_offer.declined_at = at
        self.db.flush()
        return db_offer
