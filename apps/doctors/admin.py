from django.contrib import admin
from .models import Doctor


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'specialty', 'qualification', 'rating', 'is_active']
    list_filter = ['specialty', 'is_active']
    search_fields = ['code', 'name', 'specialty']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at']
    fieldsets = (
        ('Doctor Info', {'fields': ('id', 'code', 'name', 'specialty', 'qualification', 'image', 'rating')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
