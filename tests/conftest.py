import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classbook.core.deps import get_db
from classbook.db.base import Base
from classbook.main import app
from classbook.models.enums import Category, UserRole, UserStatus
from classbook.models.gradable_item import GradableItem, item_assignees
from classbook.models.submission import Submission
from classbook.models.user import User

TEST_DB_FILE = "test_classbook.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

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


def _user(email, first, last, role, teacher=None, status=UserStatus.active):
    return User(
        email=email,
        first_name=first,
        last_name=last,
        role=role.value,
        status=status.value,
        assigned_teacher=teacher,
    )


@pytest.fixture(autouse=True)
def seed():
    """
    Seed a clean dataset for each test and return the ids tests need.

    Teacher Grace Hopper owns five items; students Ada Lovelace and Alan
    Turing are active, Bob Gone is soft-deleted. Percentages per graded
    submission are noted inline.
    """
    now = datetime.now(timezone.utc)
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(Submission).delete()
        db.execute(item_assignees.delete())
        db.query(GradableItem).delete()
        db.query(User).update({User.assigned_teacher_id: None})
        db.query(User).delete()
        db.commit()

        # Users
        teacher = _user("grace@example.com", "Grace", "Hopper", UserRole.teacher)
        idle_teacher = _user("idle@example.com", "Idle", "Teacher", UserRole.teacher)
        admin = _user("admin@example.com", "Root", "Admin", UserRole.administrator)
        ada = _user("ada@example.com", "Ada", "Lovelace", UserRole.student, teacher)
        alan = _user("alan@example.com", "Alan", "Turing", UserRole.student, teacher)
        bob = _user(
            "bob@example.com", "Bob", "Gone", UserRole.student, teacher, status=UserStatus.deleted
        )
        db.add_all([teacher, idle_teacher, admin, ada, alan, bob])
        db.commit()

        def item(category, title, max_score, due_date, created_at, assigned_to):
            return GradableItem(
                category=category.value,
                title=title,
                max_score=max_score,
                due_date=due_date,
                created_at=created_at,
                assigned_by=teacher,
                assigned_to=assigned_to,
            )

        fractions = item(Category.quiz, "Fractions", 50, None, now - timedelta(days=14), [ada, alan])
        decimals = item(Category.quiz, "Decimals", None, None, now, [ada, alan])
        essay = item(
            Category.assignment, "Essay", 20, now - timedelta(days=2), now, [ada, alan, bob]
        )
        lab = item(Category.assignment, "Lab report", 0, now + timedelta(days=5), now, [ada])
        midterm = item(
            Category.exam, "Midterm", 200, now - timedelta(days=1), now - timedelta(days=200), [ada, alan]
        )
        db.add_all([fractions, decimals, essay, lab, midterm])
        db.commit()

        def sub(item_, student, grade=None, submitted_at=None, is_submitted=True):
            return Submission(
                item=item_,
                student=student,
                is_submitted=is_submitted,
                submitted_at=submitted_at,
                grade=grade,
                graded_at=now if grade is not None else None,
            )

        db.add_all(
            [
                sub(fractions, ada, 40, now - timedelta(days=10)),  # 80%
                sub(decimals, ada, 90, now - timedelta(hours=5)),  # 90%
                sub(essay, ada, 18, essay.due_date - timedelta(hours=1)),  # 90%, on time
                sub(lab, ada, 5, now - timedelta(days=1)),  # max 0 -> 0%, on time
                sub(midterm, ada, 150, midterm.due_date + timedelta(hours=2)),  # 75%, late
                sub(fractions, alan, None, now - timedelta(days=9)),  # awaiting grading
                sub(essay, alan, 10, essay.due_date + timedelta(days=1)),  # 50%, late
                sub(midterm, alan, is_submitted=False),  # shell row
                sub(essay, bob, 20, essay.due_date - timedelta(days=1)),  # on time
            ]
        )
        db.commit()

        yield {
            "teacher_id": teacher.id,
            "idle_teacher_id": idle_teacher.id,
            "admin_id": admin.id,
            "ada_id": ada.id,
            "alan_id": alan.id,
            "bob_id": bob.id,
        }
    finally:
        db.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
