import os
from types import SimpleNamespace

# must be set before lms is imported
TEST_DB_FILE = "test_lms.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"
os.environ.setdefault("LMS_DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("LMS_BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from lms.db.session import get_db  # noqa: E402
from lms.core.security import hash_password  # noqa: E402
from lms.db.base import Base  # noqa: E402
from lms.main import app  # noqa: E402
from lms.models.assignment import Assignment  # noqa: E402
from lms.models.course import Course  # noqa: E402
from lms.models.enrollment import CourseEnrollment  # noqa: E402
from lms.models.lesson import Lesson  # noqa: E402
from lms.models.progress import StudentProgress  # noqa: E402
from lms.models.submission import AssignmentSubmission  # noqa: E402
from lms.models.subscription import Subscription  # noqa: E402
from lms.models.user import User  # noqa: E402

PASSWORD = "password123"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def clear_tables(db) -> None:
    # child -> parent
    db.query(StudentProgress).delete()
    db.query(AssignmentSubmission).delete()
    db.query(Assignment).delete()
    db.query(Subscription).delete()
    db.query(CourseEnrollment).delete()
    db.query(Lesson).delete()
    db.query(Course).delete()
    db.query(User).delete()
    db.commit()


def make_user(db, email: str, first_name: str, last_name: str, role: str) -> User:
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        password_hash=hash_password(PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """
    Seed a clean minimal dataset for each test:

    - admin@example.com (administrator)
    - mod1@example.com owns course "Algebra I" with lesson "Intro" and assignment "HW1"
    - mod2@example.com owns nothing
    - student1@example.com enrolled in "Algebra I"; student2@example.com not enrolled
    """
    db = TestingSessionLocal()
    try:
        clear_tables(db)

        make_user(db, "admin@example.com", "Ada", "Admin", "administrator")
        mod1 = make_user(db, "mod1@example.com", "Mona", "Moderator", "moderator")
        make_user(db, "mod2@example.com", "Max", "Moderator", "moderator")
        student1 = make_user(db, "student1@example.com", "Student", "One", "student")
        make_user(db, "student2@example.com", "Student", "Two", "student")

        course = Course(title="Algebra I", owner_id=mod1.id)
        db.add(course)
        db.commit()
        db.refresh(course)

        lesson = Lesson(course_id=course.id, title="Intro", order_index=0)
        db.add(lesson)
        db.add(CourseEnrollment(course_id=course.id, student_id=student1.id))
        db.commit()
        db.refresh(lesson)

        assignment = Assignment(
            lesson_id=lesson.id,
            title="HW1",
            evaluation_type="manual",
            max_points=100,
        )
        db.add(assignment)
        db.commit()

        yield SimpleNamespace(
            course_id=course.id,
            lesson_id=lesson.id,
            assignment_id=assignment.id,
            student1_id=student1.id,
            mod1_id=mod1.id,
        )
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def subscriptions_table_missing(db):
    """Drop the subscriptions table for one test so real queries against it fail."""
    db.commit()
    Subscription.__table__.drop(bind=engine)
    yield
    db.rollback()
    Subscription.__table__.create(bind=engine)
