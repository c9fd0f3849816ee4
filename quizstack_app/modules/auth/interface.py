# File: quizstack_app/modules/auth/interface.py
from typing import List

from quizstack_app.models import User
from .schemas import UserDTO


class AuthInterface:
    @staticmethod
    def to_dto(user: User) -> UserDTO:
        return UserDTO(id=user.user_id, username=user.username, role=user.user_role, is_admin=user.is_admin)

    @staticmethod
    def list_users() -> List[UserDTO]:
        """Public API: every account, ordered by username."""
        return [AuthInterface.to_dto(u) for u in User.query.order_by(User.username.asc()).all()]
