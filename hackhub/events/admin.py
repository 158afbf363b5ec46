from django.contrib import admin

from hackhub.events import models


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "organizer", "status", "start_date", "end_date"]
    search_fields = ["title", "description", "venue"]
    list_filter = ["status", "start_date"]
    filter_horizontal = ["participants"]
    raw_id_fields = ["organizer"]
