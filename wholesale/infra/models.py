from __future__ import annotations

from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SessionSnapshotORM(TimeStampedModel):
    """Opaque key-value row holding one session's serialized state."""
    key = models.CharField(max_length=255, unique=True)
    version = models.CharField(max_length=10)
    payload = models.JSONField()

    def __str__(self):
        return f"{self.key} (v{self.version})"
