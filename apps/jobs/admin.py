# apps/jobs/admin.py
from django.contrib import admin
from .models import Job, Application


class ApplicationInline(admin.TabularInline):
    model = Application
    extra = 0
    fields = ("user", "status", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "employer", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "employer__email")
    inlines = [ApplicationInline]


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ("id", "job", "user", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("job__title", "user__email")
