from django.contrib import admin
from .models import Assignment, Message, Production, Requirement


class RequirementInline(admin.TabularInline):
    model = Requirement
    extra = 0


@admin.register(Production)
class ProductionAdmin(admin.ModelAdmin):
    list_display = ("name", "date", "start_time", "end_time", "venue", "status", "requested_by", "confirmed_by")
    list_filter = ("status", "date", "overtime")
    search_fields = ("name", "venue", "requested_by__email")
    ordering = ("date", "start_time")
    inlines = [RequirementInline]


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ("production", "user", "role", "status", "assigned_by", "created_at")
    list_filter = ("status", "role")
    search_fields = ("user__email", "user__first_name", "user__last_name", "production__name")
    ordering = ("production", "user")


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("production", "sender", "created_at")
    search_fields = ("production__name", "sender__email", "text")
    ordering = ("-created_at",)
