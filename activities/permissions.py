from rest_framework.permissions import BasePermission, SAFE_METHODS


# ---- Helper functions -------------------------------------------------


def is_admin(user) -> bool:
    """
    Club administrator flag based on user.role (superusers always count).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False

    if getattr(user, "is_superuser", False):
        return True

    return getattr(user, "role", None) == "admin"


def is_self(user, target_id) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return str(user.pk) == str(target_id)


# ---- Permission classes -----------------------------------------------


class IsClubAdmin(BasePermission):
    message = "Administrator access required."

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsClubAdminOrReadOnly(BasePermission):
    """
    - SAFE methods: allowed for everyone, including anonymous visitors.
    - Writes: administrators only.
    """
    message = "Administrator access required."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)
