"""
Seed management command.

Populates the database with the demo reference data the booking flow reads:
  - 4 doctors (d1..d4) across three specialties
  - 2 saved patient profiles (p1, p2)

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from apps.doctors.models import Doctor
from apps.patients.models import Patient


DOCTORS = [
    {'code': 'd1', 'name': 'Dr. Ananya Rao',     'specialty': 'general-physician', 'qualification': 'MBBS, MD',           'rating': Decimal('4.6')},
    {'code': 'd2', 'name': 'Dr. Vikram Menon',   'specialty': 'cardiology',        'qualification': 'MBBS, DM Cardiology', 'rating': Decimal('4.8')},
    {'code': 'd3', 'name': 'Dr. Sara Thomas',    'specialty': 'dermatology',       'qualification': 'MBBS, DDVL',         'rating': Decimal('4.5')},
    {'code': 'd4', 'name': 'Dr. Imran Qureshi',  'specialty': 'general-physician', 'qualification': 'MBBS',               'rating': Decimal('4.3')},
]

PATIENTS = [
    {'code': 'p1', 'name': 'Meera Nair',  'age': 34, 'gender': 'Female', 'mobile': '+91 98765 43210', 'relation': 'Self',   'weight': '58 kg'},
    {'code': 'p2', 'name': 'Arjun Nair',  'age': 8,  'gender': 'Male',   'mobile': '+91 98765 43210', 'relation': 'Son',    'weight': '24 kg'},
]


class Command(BaseCommand):
    help = 'Seed the doctor and patient reference datasets'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing reference data before creating fresh records',
        )

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Patient.objects.all().delete()
            Doctor.objects.all().delete()

        self.stdout.write('Seeding doctors...')
        for data in DOCTORS:
            code = data['code']
            Doctor.objects.update_or_create(
                code=code, defaults={k: v for k, v in data.items() if k != 'code'},
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(DOCTORS)} doctors ready'))

        self.stdout.write('Seeding patients...')
        for data in PATIENTS:
            code = data['code']
            Patient.objects.update_or_create(
                code=code, defaults={k: v for k, v in data.items() if k != 'code'},
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(PATIENTS)} patients ready'))

        self.stdout.write(self.style.SUCCESS('\n✅ Seed complete!'))
