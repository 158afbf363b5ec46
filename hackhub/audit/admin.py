from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action", "actor", "model_name", "record_id"]
    search_fields = ["action", "message", "model_name"]
    list_filter = ["action", "model_name", "created_at"]
    readonly_fields = [f.name for f in AuditLog._meta.fields]  # noqa: SLF001
