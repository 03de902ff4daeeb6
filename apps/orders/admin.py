import logging

from django.contrib import admin

from .models import Orders

logger = logging.getLogger(__name__)


@admin.register(Orders)
class OrdersAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'customer_name', 'status', 'created_at', 'updated_at']
    list_filter = ['status', 'created_at']
    search_fields = ['id', 'user__email']
    ordering = ['-created_at']

    @admin.display(description='Клиент')
    def customer_name(self, obj):
        return (obj.contact_info or {}).get('name', '-')

    def save_model(self, request, obj, form, change):
        if change and 'status' in form.changed_data:
            logger.info(f"[ADMIN] Order {obj.pk} status changed to '{obj.status}'")
        super().save_model(request, obj, form, change)
