"""
Core base model mixins shared by the reference-data apps.
"""
import uuid
from django.db import models


class UUIDModel(models.Model):
    """Primary key is a UUID, not an auto-incrementing integer."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """Automatically tracks creation and last-update timestamps."""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class ReferenceModel(UUIDModel, TimestampedModel):
    """
    Base for reference records that booking payloads snapshot.

    `code` is the public identifier carried inside a booking payload
    (e.g. "d1"); the UUID primary key never leaves the database.
    """
    code = models.SlugField(max_length=32, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['code']

    def snapshot(self) -> dict:
        raise NotImplementedError
