from django.contrib import admin

from competitions.models import Event, Group, Team


class TeamInline(admin.TabularInline):
    model = Team
    extra = 1


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]
    inlines = [TeamInline]


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ["name", "group", "created_at"]
    list_filter = ["group"]
    search_fields = ["name"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "group", "event_type", "status", "start_time", "end_time"]
    list_filter = ["status", "event_type", "group"]
    search_fields = ["title"]
    readonly_fields = ["version"]
