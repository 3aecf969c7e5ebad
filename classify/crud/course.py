from typing import List, Optional
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.models.course import Course, Topic
from classify.schemas.course import CourseCreate, CourseUpdate, TopicRecordCreate, TopicUpdate

class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):
    def get_by_code(self, db: Session, *, code: str) -> Optional[Course]:
        return db.query(Course).filter(Course.code == code).first()

    def get_multi_filtered(
        self, db: Session, *, department_id: Optional[int] = None, level: Optional[int] = None,
        skip: int = 0, limit: int = 100
    ) -> List[Course]:
        query = db.query(Course)
        if department_id:
            query = query.filter(Course.department_id == department_id)
        if level:
            query = query.filter(Course.level == level)
        return query.order_by(Course.code).offset(skip).limit(limit).all()


class CRUDTopic(CRUDBase[Topic, TopicRecordCreate, TopicUpdate]):
    def get_by_course(self, db: Session, *, course_id: int) -> List[Topic]:
        return db.query(Topic).filter(Topic.course_id == course_id).order_by(Topic.title).all()

    def get_by_course_and_title(self, db: Session, *, course_id: int, title: str) -> Optional[Topic]:
        return db.query(Topic).filter(Topic.course_id == course_id, Topic.title == title).first()

course = CRUDCourse(Course)
topic = CRUDTopic(Topic)
