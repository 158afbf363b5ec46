from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Profile"),
            {
                "fields": (
                    "name",
                    "role",
                    "is_email_verified",
                    "profile_picture",
                    "bio",
                    "skills",
                    "github_link",
                    "linkedin_link",
                )
            },
        ),
        (
            _("Permissions"),
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "role", "password1", "password2"),
            },
        ),
    )
    list_display = ["email", "name", "role", "is_email_verified", "is_superuser"]
    list_filter = ["role", "is_email_verified", "is_staff", "is_superuser"]
    search_fields = ["name", "email"]
    ordering = ["id"]
