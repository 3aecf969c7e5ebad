from fastapi import HTTPException, status

from classify.schemas.user import UserContext
from classify.core.constants import RoleEnum


class PermissionHelper:
    @staticmethod
    def is_admin(context: UserContext) -> bool:
        return context.role == RoleEnum.ADMIN

    @staticmethod
    def is_instructor(context: UserContext) -> bool:
        return context.role == RoleEnum.INSTRUCTOR

    @staticmethod
    def is_student(context: UserContext) -> bool:
        return context.role == RoleEnum.STUDENT

    @staticmethod
    def is_staff(context: UserContext) -> bool:
        return PermissionHelper.is_admin(context) or PermissionHelper.is_instructor(context)

    @staticmethod
    def owns_attempt(context: UserContext, attempt) -> bool:
        return bool(context.student) and attempt.student_id == context.student.id

    @staticmethod
    def can_view_attempt(context: UserContext, attempt) -> bool:
        if PermissionHelper.is_staff(context):
            return True
        return PermissionHelper.owns_attempt(context, attempt)

    @staticmethod
    def require_student(context: UserContext):
        if not PermissionHelper.is_student(context) or not context.student:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only students can perform this action."
            )
        return context.student
