from django.contrib import admin

from hackhub.teams import models


@admin.register(models.Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "event", "leader", "max_members", "created_at"]
    search_fields = ["name", "event__title", "leader__email"]
    list_filter = ["event"]
    filter_horizontal = ["members"]
    raw_id_fields = ["leader", "event"]
