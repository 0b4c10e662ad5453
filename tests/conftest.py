import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from compliance_hub.core.database import get_db, init_db
from compliance_hub.main import app
from compliance_hub.models.enums import UserRole
from compliance_hub.models.user import User
from compliance_hub.schemas.compliance_rule import ComplianceRuleCreate
from compliance_hub.services.compliance_rules import ComplianceRuleService
from compliance_hub.services.jwt_service import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Create users directly; password hashing is only exercised by the auth tests"""

    def _make_user(email, role=UserRole.STARTUP.value, full_name="Test User"):
        user = User(
            email=email,
            full_name=full_name,
            role=role,
            hashed_password="not-a-real-hash",
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@example.com", role=UserRole.ADMIN.value, full_name="Admin")


@pytest.fixture
def startup_user(make_user):
    return make_user("founder@example.com", full_name="Priya Founder")


def _auth_headers(user):
    token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def user_headers(startup_user):
    return _auth_headers(startup_user)


@pytest.fixture
def rule_service(db_session):
    return ComplianceRuleService(db_session)


@pytest.fixture
def seeded_rules(rule_service):
    """A small store spanning three countries"""
    rules = [
        dict(
            country_code="IN",
            country_name="India",
            ca_type="CA",
            cs_type="CS",
            company_type="Private Limited",
            compliance_name="Tax Audit",
            frequency="annual",
            verification_required="CA",
        ),
        dict(
            country_code="IN",
            country_name="India",
            ca_type="CA",
            cs_type="CS",
            company_type="Private Limited",
            compliance_name="Annual Return",
            frequency="annual",
            verification_required="CS",
        ),
        dict(
            country_code="IN",
            country_name="India",
            company_type="Public Limited",
            compliance_name="Board Meeting Minutes",
            frequency="monthly",
            verification_required="CS",
        ),
        dict(
            country_code="US",
            country_name="United States",
            ca_type="CPA",
            cs_type="Corporate Secretary",
            company_type="LLC",
            compliance_name="Quarterly Tax Filing",
            frequency="quarterly",
            verification_required="CA",
        ),
        dict(
            country_code="GB",
            country_name="United Kingdom",
            ca_type="ACA",
            cs_type="Company Secretary",
            company_type="Limited Company",
            compliance_name="Confirmation Statement",
            frequency="annual",
            verification_required="both",
        ),
    ]
    return [rule_service.add_rule(ComplianceRuleCreate(**data)) for data in rules]
