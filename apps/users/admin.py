from django.contrib import admin

from .models import PasswordResetTokens, Users


@admin.register(Users)
class UsersAdmin(admin.ModelAdmin):
    list_display = ['id', 'email', 'full_name', 'phone', 'city', 'created_at']
    search_fields = ['email', 'full_name', 'phone']
    ordering = ['-created_at']
    exclude = ['password_hash']


@admin.register(PasswordResetTokens)
class PasswordResetTokensAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'expires_at', 'used', 'created_at']
    list_filter = ['used']
    readonly_fields = ['token']
