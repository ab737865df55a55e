from django.contrib import admin

from wholesale.infra.models import SessionSnapshotORM


@admin.register(SessionSnapshotORM)
class SessionSnapshotAdmin(admin.ModelAdmin):
    list_display = ("key", "version", "created_at", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("key", "version", "payload", "created_at", "updated_at")
