from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsParkStaff(BasePermission):
    """
    Allows access only to authenticated users with the STAFF role
    """
    message = 'Access reserved to park staff'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_park_staff)


class IsParkStaffOrReadOnly(IsParkStaff):
    """
    Anyone may read, only park staff may write
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)
