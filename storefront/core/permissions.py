from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdmin(BasePermission):
    """Super admins and Django staff"""
    message = 'Not authorized as an admin.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class IsCatalogEditor(BasePermission):
    """Roles allowed to change the catalog: superadmin and editor"""
    message = 'User role is not authorized to access this route.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_catalog_editor)


class IsCatalogEditorOrReadOnly(IsCatalogEditor):
    """Anyone may read; writes need a catalog editor"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsAdminOrReadOnly(IsAdmin):
    """Anyone may read; writes need an admin"""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)
