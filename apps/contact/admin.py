from django.contrib import admin

from .models import ContactMessages


@admin.register(ContactMessages)
class ContactMessagesAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email', 'phone', 'created_at']
    search_fields = ['name', 'email', 'phone', 'message']
    ordering = ['-created_at']
    readonly_fields = ['name', 'email', 'phone', 'country_code', 'message', 'created_at']
