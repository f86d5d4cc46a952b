from typing import List
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserBase

class CRUDUser(CRUDBase[User, UserBase, UserBase]):
    def get_active_students(self, db: Session) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == RoleEnum.STUDENT, User.is_active.is_(True))
            .order_by(User.id)
            .all()
        )

user = CRUDUser(User)
