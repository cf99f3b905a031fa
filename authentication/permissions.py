from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """
    Permission class to check if user has admin role.
    """

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'admin'
        )


class IsSupplier(permissions.BasePermission):
    """
    Permission class to check if user has supplier role.
    """

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'supplier'
        )


class IsBuyer(permissions.BasePermission):
    """
    Permission class to check if user has buyer role.
    """

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'buyer'
        )


class IsAdminOrSupplier(permissions.BasePermission):
    """
    Permission class to check if user has admin or supplier role.
    """

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role in ['admin', 'supplier']
        )
