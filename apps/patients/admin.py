from django.contrib import admin
from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'age', 'gender', 'mobile', 'relation', 'is_active']
    list_filter = ['gender', 'relation', 'is_active']
    search_fields = ['code', 'name', 'mobile']
    readonly_fields = ['id', 'created_at', 'updated_at']
