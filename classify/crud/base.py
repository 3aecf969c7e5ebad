from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
from classify.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

Payload = Union[BaseModel, Dict[str, Any]]


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Repository shared by every table.

    Writes commit by default. Services that group several writes into one
    transaction pass ``commit=False`` and commit once themselves.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    @staticmethod
    def _as_dict(obj_in: Payload, partial: bool = False) -> Dict[str, Any]:
        if isinstance(obj_in, dict):
            return obj_in
        return obj_in.model_dump(exclude_unset=partial)

    def _persist(self, db: Session, db_objs: Iterable[ModelType], commit: bool) -> None:
        if commit:
            db.commit()
            for db_obj in db_objs:
                db.refresh(db_obj)
        else:
            db.flush()

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_by_ids(self, db: Session, *, ids: List[int]) -> List[ModelType]:
        if not ids:
            return []
        return db.query(self.model).filter(self.model.id.in_(ids)).all()

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        db_obj = self.model(**self._as_dict(obj_in))
        db.add(db_obj)
        self._persist(db, [db_obj], commit)
        return db_obj

    def create_multi(self, db: Session, *, objs_in: List[CreateSchemaType], commit: bool = True) -> List[ModelType]:
        db_objs = [self.model(**self._as_dict(obj_in)) for obj_in in objs_in]
        db.add_all(db_objs)
        self._persist(db, db_objs, commit)
        return db_objs

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        for field, value in self._as_dict(obj_in, partial=True).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        self._persist(db, [db_obj], commit)
        return db_obj
