import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.core.constants import RoleEnum
from classify.crud.academic_session import academic_session as crud_session, semester as crud_semester
from classify.crud.course import course as crud_course, topic as crud_topic
from classify.crud.course_enrollment import course_enrollment as crud_enrollment
from classify.crud.department import department as crud_department
from classify.crud.student import student as crud_student
from classify.crud.user import user as crud_user
from classify.schemas.academic_session import AcademicSessionCreate, SemesterCreate, SemesterRecordCreate
from classify.schemas.course import (
    CourseCreate, EnrollmentCreate, EnrollmentRequest, TopicCreate, TopicRecordCreate
)
from classify.schemas.department import DepartmentCreate
from classify.schemas.student import StudentCreate, StudentRecordCreate
from classify.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AcademicService:
    """Reference data the CBT flows depend on: departments, semesters, courses and students."""

    def _require_department(self, db: Session, department_id: Optional[int]):
        if department_id is not None and not crud_department.get(db, id=department_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found.")

    def _require_course(self, db: Session, course_id: int):
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        return course

    def create_department(self, db: Session, department_in: DepartmentCreate):
        if crud_department.get_by_name(db, name=department_in.name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department already exists.")
        return crud_department.create(db, obj_in=department_in)

    def create_session(self, db: Session, session_in: AcademicSessionCreate):
        if crud_session.get_by_title(db, title=session_in.title):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Academic session already exists.")
        db_session = crud_session.create(db, obj_in=session_in)
        return crud_session.get(db, id=db_session.id)

    def create_semester(self, db: Session, session_id: int, semester_in: SemesterCreate):
        db_session = crud_session.get(db, id=session_id)
        if not db_session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic session not found.")
        if any(s.name == semester_in.name for s in db_session.semesters):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Semester already exists in this session.")

        db_semester = crud_semester.create(
            db, obj_in=SemesterRecordCreate(session_id=session_id, name=semester_in.name, is_current=False)
        )
        if semester_in.is_current:
            db_semester = crud_semester.set_current(db, semester=db_semester)
        return db_semester

    def activate_semester(self, db: Session, semester_id: int):
        db_semester = crud_semester.get(db, id=semester_id)
        if not db_semester:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found.")
        logger.info(f"Semester {semester_id} set as current")
        return crud_semester.set_current(db, semester=db_semester)

    def create_course(self, db: Session, course_in: CourseCreate):
        self._require_department(db, course_in.department_id)
        if crud_course.get_by_code(db, code=course_in.code):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists.")
        return crud_course.create(db, obj_in=course_in)

    def create_topic(self, db: Session, course_id: int, topic_in: TopicCreate):
        self._require_course(db, course_id)
        if crud_topic.get_by_course_and_title(db, course_id=course_id, title=topic_in.title):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Topic already exists for this course.")
        return crud_topic.create(db, obj_in=TopicRecordCreate(course_id=course_id, title=topic_in.title))

    def list_topics(self, db: Session, course_id: int):
        self._require_course(db, course_id)
        return crud_topic.get_by_course(db, course_id=course_id)

    def enroll_students(self, db: Session, course_id: int, enrollment_in: EnrollmentRequest):
        """Enrol students for a semester. Existing enrolments are left untouched."""
        self._require_course(db, course_id)
        if not crud_semester.get(db, id=enrollment_in.semester_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found.")

        enrollments = []
        for student_id in dict.fromkeys(enrollment_in.student_ids):
            if not crud_student.get(db, id=student_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Student {student_id} not found.")
            existing = crud_enrollment.get_by_key(
                db, student_id=student_id, course_id=course_id, semester_id=enrollment_in.semester_id
            )
            if existing:
                enrollments.append(existing)
                continue
            enrollments.append(crud_enrollment.create(
                db,
                obj_in=EnrollmentCreate(student_id=student_id, course_id=course_id, semester_id=enrollment_in.semester_id),
                commit=False,
            ))
        db.commit()
        return enrollments

    def create_student(self, db: Session, student_in: StudentCreate):
        self._require_department(db, student_in.department_id)
        if crud_user.get_by_email(db, email=student_in.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered.")
        if crud_student.get_by_matric_number(db, matric_number=student_in.matric_number):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Matric number already exists.")

        db_user = crud_user.create(
            db,
            obj_in=UserCreate(
                email=student_in.email.lower(),
                full_name=f"{student_in.first_name} {student_in.last_name}",
                role=RoleEnum.STUDENT,
            ),
            commit=False,
        )
        db_student = crud_student.create(
            db,
            obj_in=StudentRecordCreate(user_id=db_user.id, **student_in.model_dump(exclude={"email"})),
            commit=False,
        )
        db.commit()
        db.refresh(db_student)
        return db_student

    def list_students(self, db: Session, department_id: Optional[int] = None, level: Optional[int] = None,
                      search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List:
        return crud_student.get_multi_filtered(
            db, department_id=department_id, level=level, search=search, skip=skip, limit=limit
        )


academic_service = AcademicService()
