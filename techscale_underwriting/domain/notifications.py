"""Notification payload builders - one per event the platform tells applicants about"""

from typing import Optional
from techscale_underwriting.domain.models import LoanOffer, Notification, NotificationType

DEFAULT_LENDER_NAME = "TechScale Partner"


def application_submitted(
    user_id: str,
    application_id: str,
    lender_name: Optional[str] = None,
    loan_amount: Optional[str] = None,
) -> Notification:
    return Notification(
        user_id=user_id,
        type=NotificationType.APPLICATION_SUBMITTED,
        data={
            "applicationId": application_id,
            "lenderName": lender_name or DEFAULT_LENDER_NAME,
            "loanAmount": loan_amount or "N/A",
        },
    )


def application_status_change(
    user_id: str,
    application_id: str,
    new_status: str,
    notes: Optional[str] = None,
) -> Notification:
    return Notification(
        user_id=user_id,
        type=NotificationType.APPLICATION_STATUS_CHANGE,
        data={"applicationId": application_id, "newStatus": new_status, "notes": notes},
    )


def offer_available(user_id: str, offer_id: str, offer: LoanOffer) -> Notification:
    """Offer summary in the display units the email templates expect"""
    if offer.apr_rate is not None:
        interest_rate = f"{offer.apr_rate}% APR"
    else:
        interest_rate = f"{offer.isa_percentage}% of income"

    return Notification(
        user_id=user_id,
        type=NotificationType.OFFER_AVAILABLE,
        data={
            "offerId": offer_id,
            "offerType": offer.offer_type.value,
            "loanAmount": f"£{offer.loan_amount:,.0f}",
            "interestRate": interest_rate,
            "repaymentTerm": f"{offer.repayment_term_months} months",
            "validUntil": offer.offer_valid_until.isoformat(),
        },
    )


def document_verified(
    user_id: str, document_type: str, application_id: Optional[str] = None
) -> Notification:
    return Notification(
        user_id=user_id,
        type=NotificationType.DOCUMENT_VERIFIED,
        data={"documentType": document_type, "applicationId": application_id},
    )


def document_rejected(
    user_id: str,
    document_type: str,
    rejection_reason: Optional[str] = None,
    application_id: Optional[str] = None,
) -> Notification:
    return Notification(
        user_id=user_id,
        type=NotificationType.DOCUMENT_REJECTED,
        data={
            "documentType": document_type,
            "rejectionReason": rejection_reason,
            "applicationId": application_id,
        },
    )
