from django.db import models


class Users(models.Model):
    """Клиент сайта. Email может отсутствовать только у старых гостевых записей."""
    email = models.CharField(unique=True, max_length=255, blank=True, null=True)
    password_hash = models.CharField(max_length=255)
    full_name = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    country_code = models.CharField(max_length=10, blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'Пользователь'
        verbose_name_plural = 'Пользователи'

    def __str__(self):
        return self.email or f'user #{self.pk}'


class PasswordResetTokens(models.Model):
    token = models.CharField(unique=True, max_length=64)
    user = models.ForeignKey(Users, models.CASCADE, related_name='reset_tokens')
    expires_at = models.DateTimeField()
    used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'password_reset_tokens'
        verbose_name = 'Токен сброса пароля'
        verbose_name_plural = 'Токены сброса пароля'

    def __str__(self):
        return f'{self.token[:5]}... (user #{self.user_id})'
