"""GET /v1/assessments/history - Fetch a user's underwriting history"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from techscale_underwriting.api.v1.schemas import AssessmentHistoryItem, AssessmentHistoryResponse
from techscale_underwriting.infrastructure.database.session import get_db
from techscale_underwriting.infrastructure.database.repositories import AssessmentRepository

router = APIRouter()


@router.get("/assessments/history", response_model=AssessmentHistoryResponse)
def get_assessment_history(
    user_id: str = Query(..., description="User identifier"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent risk assessments for a user, newest first.
    """
    assessments = AssessmentRepository(db).get_assessments_by_user(user_id, limit=limit)

    items = [
        AssessmentHistoryItem(
            assessment_id=str(a.id),
            application_id=a.application_id,
            risk_score=a.risk_score,
            risk_tier=a.risk_tier,
            decision=a.decision,
            created_at=a.created_at.isoformat(),
        )
        for a in assessments
    ]

    return AssessmentHistoryResponse(user_id=user_id, assessments=items)
