"""Pytest fixtures for testing"""

import pytest
from dataclasses import asdict
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from techscale_underwriting.api.main import create_app
from techscale_underwriting.api.dependencies import get_notification_client
from techscale_underwriting.infrastructure.database.models import Base
from techscale_underwriting.infrastructure.database.repositories import RuleRepository
from techscale_underwriting.infrastructure.database.session import build_engine, get_db
from techscale_underwriting.domain.models import (
    Address,
    CurrentEmployment,
    EducationCareer,
    FinancialInfo,
    LoanApplication,
    LoanTypeRequest,
    Notification,
    PersonalInfo,
    ProfessionalEmployment,
    ProgramInfo,
    RuleType,
    UnderwritingRule,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotificationClient:
    """Stands in for the dispatcher; keeps every notification it is asked to send"""

    def __init__(self):
        self.sent: List[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> RecordingNotificationClient:
    return RecordingNotificationClient()


@pytest.fixture
def client(db: Session, notifier: RecordingNotificationClient) -> TestClient:
    """Create FastAPI test client with test database and a recording notifier"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_client] = lambda: notifier
    return TestClient(app)


@pytest.fixture
def active_rule(db: Session):
    """A single active rule so the engine can start"""
    record = RuleRepository(db).create_rule(
        UnderwritingRule(rule_name="Baseline affordability", rule_type=RuleType.INCOME)
    )
    db.commit()
    return record


@pytest.fixture
def complete_personal_info() -> PersonalInfo:
    return PersonalInfo(
        first_name="Amara",
        last_name="Okafor",
        date_of_birth="1996-04-12",
        gender="female",
        nationality="Nigerian",
        address=Address(
            street="12 Marina Road",
            city="Lagos",
            state="Lagos",
            postal_code="101001",
            country="Nigeria",
        ),
        phone="+2348012345678",
        email="amara@example.com",
    )


@pytest.fixture
def strong_application(complete_personal_info: PersonalInfo) -> LoanApplication:
    """£60,000 household income, Master's degree, full-time job, complete profile"""
    return LoanApplication(
        personal_info=complete_personal_info,
        education_career=EducationCareer(
            highest_qualification="Master's Degree",
            institution="University of Lagos",
            graduation_year="2020",
            current_employment=CurrentEmployment(company="Andela", position="Engineer"),
        ),
        professional_employment=ProfessionalEmployment(employment_type="full-time"),
        program_info=ProgramInfo(
            institution="Imperial College London",
            program_name="MSc Computing",
            field_of_study="Computer Science",
            country="United Kingdom",
            total_cost="£30,000",
        ),
        financial_info=FinancialInfo(household_income="£60,000"),
        loan_type_request=LoanTypeRequest(
            type="study-abroad",
            amount="£10,000",
            purpose="Software engineering career in fintech",
        ),
    )


@pytest.fixture
def weak_application() -> LoanApplication:
    """No income, no recognised qualification, unemployed, no personal info"""
    return LoanApplication(
        financial_info=FinancialInfo(household_income=""),
        loan_type_request=LoanTypeRequest(type="study-abroad", amount="£20,000"),
    )


@pytest.fixture
def strong_application_payload(strong_application: LoanApplication) -> dict:
    """JSON body for POST /v1/underwriting built from the strong application"""
    application = asdict(strong_application)
    application["status"] = strong_application.status.value
    return {"application_id": "app_strong", "user_id": "user_strong", "application": application}
