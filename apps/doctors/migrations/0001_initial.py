import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('code', models.SlugField(max_length=32, unique=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('name', models.CharField(max_length=120)),
                ('specialty', models.SlugField(help_text='Slug form, e.g. "general-physician". Title-cased for display.', max_length=80)),
                ('qualification', models.CharField(blank=True, max_length=120)),
                ('image', models.URLField(blank=True)),
                ('rating', models.DecimalField(decimal_places=1, default=Decimal('4.6'), max_digits=2)),
            ],
            options={
                'verbose_name': 'Doctor',
                'verbose_name_plural': 'Doctors',
                'ordering': ['code'],
                'abstract': False,
            },
        ),
    ]
