from django.contrib import admin

from hackhub.chat import models


@admin.register(models.Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "team", "sender", "is_read", "created_at"]
    search_fields = ["content", "sender__email", "team__name"]
    list_filter = ["is_read", "created_at"]
    raw_id_fields = ["sender", "team"]
