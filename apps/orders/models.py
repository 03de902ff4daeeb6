from django.db import models
from apps.users.models import Users


class Orders(models.Model):
    STATUS_CHOICES = [
        ('new', 'Новый'),
        ('processing', 'В обработке'),
        ('shipped', 'Отправлен'),
        ('delivered', 'Доставлен'),
        ('cancelled', 'Отменён'),
    ]

    user = models.ForeignKey(Users, models.SET_NULL, blank=True, null=True, related_name='orders')
    # vehicle / parts / contact_info хранятся как документы, в том виде, в каком пришли с формы
    vehicle = models.JSONField()
    parts = models.JSONField()
    contact_info = models.JSONField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='new')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        verbose_name = 'Заказ'
        verbose_name_plural = 'Заказы'

    def __str__(self):
        return f'Заказ #{self.pk}'
