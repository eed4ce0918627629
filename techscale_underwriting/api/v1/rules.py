"""GET/POST /v1/rules - manage underwriting rules"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from techscale_underwriting.api.v1.schemas import RuleCreateRequest, RuleListResponse, RuleSchema
from techscale_underwriting.infrastructure.database.session import get_db
from techscale_underwriting.infrastructure.database.repositories import RuleRepository
from techscale_underwriting.domain.models import UnderwritingRule

router = APIRouter()


def _rule_schema(record) -> RuleSchema:
    return RuleSchema(
        rule_id=str(record.id),
        rule_name=record.rule_name,
        rule_type=record.rule_type,
        conditions=record.conditions or {},
        weight=record.weight,
        active=record.active,
    )


@router.get("/rules", response_model=RuleListResponse)
def list_rules(db: Session = Depends(get_db)):
    return RuleListResponse(rules=[_rule_schema(r) for r in RuleRepository(db).list_rules()])


@router.post("/rules", response_model=RuleSchema, status_code=201)
def create_rule(request_body: RuleCreateRequest, db: Session = Depends(get_db)):
    record = RuleRepository(db).create_rule(
        UnderwritingRule(
            rule_name=request_body.rule_name,
            rule_type=request_body.rule_type,
            conditions=request_body.conditions,
            weight=request_body.weight,
            active=request_body.active,
        )
    )
    db.commit()
    return _rule_schema(record)
