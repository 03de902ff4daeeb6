from django.db import models


class ContactMessages(models.Model):
    name = models.CharField(max_length=255)
    email = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=50)
    country_code = models.CharField(max_length=10)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'contact_messages'
        verbose_name = 'Сообщение с формы контактов'
        verbose_name_plural = 'Сообщения с формы контактов'

    def __str__(self):
        return f'{self.name} ({self.created_at:%d.%m.%Y})'
