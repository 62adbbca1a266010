"""
User administration service: listing, profile updates and account activation.
"""
from typing import List, Optional

from sqlalchemy import or_

from fishmarket.database import db
from fishmarket.models.user import User
from fishmarket.schemas.users import UpdateUserRequest, UserFilters
from fishmarket.services.errors import NotFound
from fishmarket.services.structured_logging import get_logger
from fishmarket.utils.clock import utcnow

logger = get_logger(__name__)


class UserService:

    def list_users(self, filters: UserFilters) -> List[User]:
        query = User.query

        if filters.search:
            query = query.filter(or_(
                User.full_name.icontains(filters.search, autoescape=True),
                User.email.icontains(filters.search, autoescape=True),
            ))
        if filters.is_admin is not None:
            query = query.filter(User.is_admin.is_(filters.is_admin))
        if filters.is_active is not None:
            query = query.filter(User.is_active.is_(filters.is_active))

        query = query.order_by(User.id.asc())
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit:
            query = query.limit(filters.limit)
        return query.all()

    def get_user(self, user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    def update_user(self, user_id: int, data: UpdateUserRequest) -> User:
        user = db.session.get(User, user_id)
        if not user:
            error = NotFound("User not found", user_id=user_id)
            logger.log_operation_failure('update_user', error, user_id=user_id)
            raise error

        for field, value in data.changes().items():
            setattr(user, field, value)
        user.updated_at = utcnow()
        db.session.commit()
        return user

    def set_active(self, user_id: int, active: bool) -> bool:
        """Activate or deactivate an account; False only when the user does not exist."""
        user = db.session.get(User, user_id)
        if not user:
            logger.info("Account status change for unknown user", user_id=user_id, active=active)
            return False

        if user.is_active != active:
            user.is_active = active
            user.updated_at = utcnow()
            db.session.commit()
            logger.info("Account status changed", user_id=user_id, active=active)
        return True

    def deactivate_user(self, user_id: int) -> bool:
        return self.set_active(user_id, False)

    def activate_user(self, user_id: int) -> bool:
        return self.set_active(user_id, True)
