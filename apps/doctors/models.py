"""
Doctor model — the reference dataset the booking flow snapshots from.

A booking payload never stores a foreign key to a Doctor. It embeds the
dict returned by `Doctor.snapshot()` so the summary page can render
without touching the database once a snapshot exists.
"""
from decimal import Decimal

from django.db import models
from apps.core.models import ReferenceModel

DEFAULT_DOCTOR_IMAGE = (
    'https://images.unsplash.com/photo-1544005313-94ddf0286df2'
    '?auto=format&fit=crop&w=200&q=60'
)


class Doctor(ReferenceModel):
    name = models.CharField(max_length=120)
    specialty = models.SlugField(
        max_length=80,
        help_text='Slug form, e.g. "general-physician". Title-cased for display.',
    )
    qualification = models.CharField(max_length=120, blank=True)
    image = models.URLField(blank=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal('4.6'))

    class Meta(ReferenceModel.Meta):
        verbose_name = 'Doctor'
        verbose_name_plural = 'Doctors'

    def __str__(self):
        return f"{self.name} ({self.code})"

    def snapshot(self) -> dict:
        return {
            'id': self.code,
            'name': self.name,
            'specialty': self.specialty,
            'qualification': self.qualification,
            'image': self.image or DEFAULT_DOCTOR_IMAGE,
            'rating': str(self.rating),
        }


def find_doctor_snapshot(doctor_id, default_first=True):
    """
    Snapshot of the doctor with public id `doctor_id`.

    Falls back to the first active doctor (by code) when the id is unknown
    and `default_first` is set. Returns None when the dataset is empty.
    """
    doctor = None
    if doctor_id:
        doctor = Doctor.objects.active().filter(code=doctor_id).first()
    if doctor is None and default_first:
        doctor = Doctor.objects.active().order_by('code').first()
    return doctor.snapshot() if doctor else None
