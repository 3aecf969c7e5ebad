import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_DIR", "./logs")

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from classify.core.config import settings
from classify.core.constants import RoleEnum
from classify.core.database import Base, get_db
from classify.core.security import create_access_token
from classify.crud.academic_session import academic_session as crud_session, semester as crud_semester
from classify.crud.course import course as crud_course, topic as crud_topic
from classify.crud.course_enrollment import course_enrollment as crud_enrollment
from classify.crud.department import department as crud_department
from classify.crud.question import question as crud_question
from classify.crud.student import student as crud_student
from classify.crud.user import user as crud_user
from classify.utils import deps as deps_utils
import classify.models  # noqa: F401
import main
from tests.helpers.asserts import auth_headers

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        with database_engine.begin() as connection:
            for table in reversed(Base.metadata.sorted_tables):
                connection.execute(table.delete())

@pytest.fixture(scope="function")
def client(db_session):
    # Re-initialize the app for each test function to ensure a clean state
    from importlib import reload
    reload(main)
    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client


def _make_user(db_session, role: RoleEnum, full_name: str = None):
    return crud_user.create(db_session, obj_in={
        "full_name": full_name or f"Test {role.value}",
        "email": f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
        "role": role,
        "is_active": True,
    })

def _token_for(user) -> str:
    return create_access_token({"user_id": user.id, "role": user.role.value})


@pytest.fixture
def admin_token(db_session):
    return _token_for(_make_user(db_session, RoleEnum.ADMIN))

@pytest.fixture
def instructor_token(db_session):
    return _token_for(_make_user(db_session, RoleEnum.INSTRUCTOR))

@pytest.fixture
def department(db_session):
    return crud_department.create(db_session, obj_in={"name": f"Computer Science {uuid.uuid4().hex[:4]}", "code": None})

@pytest.fixture
def current_semester(db_session):
    session = crud_session.create(db_session, obj_in={"title": f"2025/2026-{uuid.uuid4().hex[:4]}"})
    semester = crud_semester.create(db_session, obj_in={"session_id": session.id, "name": "First", "is_current": False})
    return crud_semester.set_current(db_session, semester=semester)

@pytest.fixture
def course(db_session, department):
    return crud_course.create(db_session, obj_in={
        "code": f"CSC{uuid.uuid4().hex[:4].upper()}",
        "title": "Introduction to Computing",
        "department_id": department.id,
        "level": 100,
        "credit_units": 3,
    })

@pytest.fixture
def topics(db_session, course):
    return [
        crud_topic.create(db_session, obj_in={"course_id": course.id, "title": title})
        for title in ("Number Systems", "Logic Gates")
    ]

@pytest.fixture
def make_student(db_session, department):
    """Factory returning ``(student, token)``."""
    def _make_student(level: int = 100, department_id=None):
        user = _make_user(db_session, RoleEnum.STUDENT)
        student = crud_student.create(db_session, obj_in={
            "user_id": user.id,
            "matric_number": f"CSC/{uuid.uuid4().hex[:6].upper()}",
            "first_name": "Ada",
            "last_name": f"Student{user.id}",
            "department_id": department_id if department_id is not None else department.id,
            "level": level,
        })
        return student, _token_for(user)
    return _make_student

@pytest.fixture
def student_with_token(make_student, course, current_semester, db_session):
    student, token = make_student()
    crud_enrollment.create(db_session, obj_in={
        "student_id": student.id, "course_id": course.id, "semester_id": current_semester.id
    })
    return student, token

@pytest.fixture
def make_questions(db_session, course):
    """Factory creating active questions; answers cycle A, B, C, D."""
    def _make_questions(count: int, topic_id=None, marks: float = 1.0):
        created = []
        for i in range(count):
            created.append(crud_question.create(db_session, obj_in={
                "course_id": course.id,
                "topic_id": topic_id,
                "question_text": f"Question {i + 1}?",
                "option_a": "Alpha",
                "option_b": "Bravo",
                "option_c": "Charlie",
                "option_d": "Delta",
                "correct_option": "ABCD"[i % 4],
                "explanation": None,
                "marks": marks,
                "difficulty": "MEDIUM",
                "is_active": True,
            }))
        return created
    return _make_questions

@pytest.fixture
def published_exam(client, instructor_token, course, current_semester, make_questions):
    """A published five-question TEST exam, one mark each, pass mark 60%."""
    questions = make_questions(5)
    response = client.post(
        "/cbt/exams",
        headers=auth_headers(instructor_token),
        json={
            "course_id": course.id,
            "semester_id": current_semester.id,
            "title": "CSC Quiz",
            "category": "TEST",
            "duration_minutes": 30,
            "pass_mark": 60,
            "question_ids": [q.id for q in questions],
        },
    )
    assert response.status_code == 201, response.text
    exam_id = response.json()["data"]["id"]
    publish = client.put(f"/cbt/exams/{exam_id}", headers=auth_headers(instructor_token), json={"is_published": True})
    assert publish.status_code == 200, publish.text
    return {"id": exam_id, "questions": questions}
