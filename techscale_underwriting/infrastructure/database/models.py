"""SQLAlchemy ORM models for underwriting rules, assessments and offers"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class UnderwritingRuleRecord(Base):
    """Underwriting rule; the engine only starts with at least one active rule"""

    __tablename__ = "underwriting_rules"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    rule_name = Column(Text, nullable=False)
    rule_type = Column(String(32), nullable=False)
    conditions = Column(JSON, nullable=False, default=dict)
    weight = Column(Float, nullable=False, default=1.0)
    active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AssessmentRecord(Base):
    """Risk assessment for one underwriting run; never updated after insert"""

    __tablename__ = "underwriting_assessments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    application_id = Column(Text, nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    risk_score = Column(Integer, nullable=False)
    risk_tier = Column(String(16), nullable=False)
    decision = Column(String(16), nullable=False)
    affordability_score = Column(Integer, nullable=False)
    education_score = Column(Integer, nullable=False)
    employment_score = Column(Integer, nullable=False)
    sponsor_score = Column(Integer, nullable=False)
    assessment_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    offers = relationship("LoanOfferRecord", back_populates="assessment", cascade="all, delete-orphan")


class LoanOfferRecord(Base):
    """Loan offer; column names are read by the document exporter"""

    __tablename__ = "loan_offers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    assessment_id = Column(
        Uuid(as_uuid=True), ForeignKey("underwriting_assessments.id", ondelete="CASCADE"), nullable=False
    )
    application_id = Column(Text, nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    offer_type = Column(String(16), nullable=False)
    loan_amount = Column(Float, nullable=False)
    apr_rate = Column(Float, nullable=True)
    isa_percentage = Column(Float, nullable=True)
    repayment_term_months = Column(Integer, nullable=False)
    grace_period_months = Column(Integer, nullable=False)
    monthly_payment = Column(Float, nullable=True)
    total_repayment = Column(Float, nullable=True)
    repayment_schedule = Column(JSON, nullable=False)
    terms_and_conditions = Column(JSON, nullable=False)
    offer_valid_until = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    declined_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    assessment = relationship("AssessmentRecord", back_populates="offers")
