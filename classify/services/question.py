import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.core.constants import DifficultyEnum
from classify.crud.course import course as crud_course, topic as crud_topic
from classify.crud.question import question as crud_question
from classify.schemas.question import (
    Question, QuestionBatchCreate, QuestionCreate, QuestionUpdate, TopicQuestionsDeleted
)
from classify.schemas.response import PaginatedData

logger = logging.getLogger(__name__)


class QuestionService:

    def _require_course(self, db: Session, course_id: int):
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        return course

    def _validate_topic(self, db: Session, course_id: int, topic_id: Optional[int]):
        if topic_id is None:
            return
        topic = crud_topic.get(db, id=topic_id)
        if not topic or topic.course_id != course_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Topic does not belong to the selected course."
            )

    def _get_active_question(self, db: Session, question_id: int):
        db_question = crud_question.get(db, id=question_id)
        if not db_question or not db_question.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found.")
        return db_question

    def list_questions(
        self,
        db: Session,
        course_id: Optional[int] = None,
        difficulty: Optional[DifficultyEnum] = None,
        topic_ids: Optional[List[int]] = None,
        page: int = 1,
        limit: int = 50,
    ) -> PaginatedData[Question]:
        skip = (page - 1) * limit
        items = crud_question.get_multi_filtered(
            db, course_id=course_id, difficulty=difficulty, topic_ids=topic_ids, skip=skip, limit=limit
        )
        total = crud_question.count_filtered(db, course_id=course_id, difficulty=difficulty, topic_ids=topic_ids)
        return PaginatedData[Question].build(
            items=[Question.model_validate(q) for q in items], total=total, page=page, size=limit
        )

    def create_question(self, db: Session, question_in: QuestionCreate):
        self._require_course(db, question_in.course_id)
        self._validate_topic(db, question_in.course_id, question_in.topic_id)
        return crud_question.create(db, obj_in=question_in)

    def create_questions_batch(self, db: Session, batch_in: QuestionBatchCreate):
        self._require_course(db, batch_in.course_id)
        objs_in = []
        for item in batch_in.questions:
            topic_id = item.topic_id if item.topic_id is not None else batch_in.topic_id
            self._validate_topic(db, batch_in.course_id, topic_id)
            objs_in.append(QuestionCreate(
                **item.model_dump(exclude={"topic_id"}),
                course_id=batch_in.course_id,
                topic_id=topic_id,
            ))
        created = crud_question.create_multi(db, objs_in=objs_in)
        logger.info(f"Created {len(created)} questions for course {batch_in.course_id}")
        return created

    def update_question(self, db: Session, question_id: int, question_in: QuestionUpdate):
        db_question = self._get_active_question(db, question_id)
        if "topic_id" in question_in.model_fields_set:
            self._validate_topic(db, db_question.course_id, question_in.topic_id)
        return crud_question.update(db, db_obj=db_question, obj_in=question_in)

    def delete_question(self, db: Session, question_id: int):
        db_question = self._get_active_question(db, question_id)
        return crud_question.update(db, db_obj=db_question, obj_in={"is_active": False})

    def delete_topic_questions(self, db: Session, topic_id: int) -> TopicQuestionsDeleted:
        if not crud_topic.get(db, id=topic_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Topic not found.")
        deleted, deactivated = crud_question.delete_by_topic(db, topic_id=topic_id)
        db.commit()
        logger.info(f"Cleared topic {topic_id}: {deleted} questions deleted, {deactivated} in use and deactivated")
        return TopicQuestionsDeleted(topic_id=topic_id, deleted=deleted, deactivated=deactivated)


question_service = QuestionService()
