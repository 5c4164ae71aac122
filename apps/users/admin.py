# apps/users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


# ==================== CUSTOM USER ADMIN ====================
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("id", "email", "name", "role", "is_blocked", "date_joined", "is_active")
    list_filter = ("role", "is_blocked", "is_active", "date_joined")
    search_fields = ("email", "name")
    ordering = ("-date_joined",)
    readonly_fields = ("date_joined", "last_login")
    actions = ("block_users", "unblock_users")

    fieldsets = (
        (None, {"fields": ("username", "email", "password")}),
        ("Personal Info", {"fields": ("name", "role")}),
        ("Status", {"fields": ("is_blocked", "is_active", "is_staff", "is_superuser")}),
        ("Timestamps", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("username", "email", "name", "password1", "password2", "role"),
        }),
    )

    # Blocked users are refused on their next socket connect
    @admin.action(description="Block selected users")
    def block_users(self, request, queryset):
        updated = queryset.update(is_blocked=True)
        self.message_user(request, f"Blocked {updated} users")

    @admin.action(description="Unblock selected users")
    def unblock_users(self, request, queryset):
        updated = queryset.update(is_blocked=False)
        self.message_user(request, f"Unblocked {updated} users")
