from typing import Optional
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.models.user import User
from classify.schemas.user import UserCreate

class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower().strip()).first()

user = CRUDUser(User)
