# customers/permissions.py
from rest_framework.permissions import BasePermission

from accounts.models import User


class IsCustomer(BasePermission):
    """
    Allows access only to customers (admins included).
    Keeps role check logic centralized.
    """
    message = "Only customers can perform this action"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) in (User.ROLE_CUSTOMER, User.ROLE_ADMIN)
