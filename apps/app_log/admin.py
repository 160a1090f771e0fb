# apps/app_log/admin.py
from django.contrib import admin

from .models import AppLog


@admin.register(AppLog)
class AppLogAdmin(admin.ModelAdmin):
    list_display = (
        "creado_en",
        "nivel",
        "origen",
        "evento",
        "resource_type",
        "resource_id",
    )
    list_filter = ("nivel", "origen", "evento", "creado_en")
    search_fields = ("mensaje", "resource_id", "meta_json")
    ordering = ("-creado_en",)
