from django.utils import timezone
from rest_framework import serializers

from .models import Orders

VEHICLE_TYPES = ('passenger', 'commercial', 'chinese')

ACCOUNT_REQUIRED_MESSAGE = "Email и пароль (минимум 6 символов) обязательны при создании аккаунта"


class VehicleSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=VEHICLE_TYPES)
    vin = serializers.CharField(required=False, allow_blank=True)
    make = serializers.CharField(required=False, allow_blank=True)
    model = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(required=False, allow_null=True, min_value=1900)
    engineVolume = serializers.CharField(required=False, allow_blank=True)
    fuelType = serializers.CharField(required=False, allow_blank=True)

    def validate_year(self, value):
        if value is not None and value > timezone.now().year + 1:
            raise serializers.ValidationError("Год выпуска не может быть больше следующего года")
        return value


class PartSerializer(serializers.Serializer):
    name = serializers.CharField(error_messages={'blank': 'Название запчасти обязательно'})
    quantity = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Минимальное количество 1'})
    sku = serializers.CharField(required=False, allow_blank=True)
    brand = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)


class ContactInfoSerializer(serializers.Serializer):
    name = serializers.CharField(error_messages={'blank': 'Имя обязательно'})
    email = serializers.EmailField(required=False, allow_blank=True,
                                   error_messages={'invalid': 'Неверный формат email'})
    phone = serializers.CharField(error_messages={'blank': 'Телефон обязателен'})
    countryCode = serializers.CharField(error_messages={'blank': 'Код страны обязателен'})
    city = serializers.CharField(required=False, allow_blank=True)
    comments = serializers.CharField(required=False, allow_blank=True)


class OrderPayloadSerializer(serializers.Serializer):
    """Данные заказа: автомобиль, непустой список запчастей, контакты"""
    vehicle = VehicleSerializer()
    parts = PartSerializer(many=True, allow_empty=False)
    contactInfo = ContactInfoSerializer()


class GuestOrderSerializer(OrderPayloadSerializer):
    createAccount = serializers.BooleanField(required=False, default=False)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, write_only=True)

    def validate(self, attrs):
        if attrs.get('createAccount'):
            email = (attrs['contactInfo'].get('email') or '').strip()
            password = attrs.get('password') or ''
            if not email or len(password) < 6:
                raise serializers.ValidationError(ACCOUNT_REQUIRED_MESSAGE)
        return attrs


class OrderSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True, allow_null=True)
    contactInfo = serializers.JSONField(source='contact_info', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Orders
        fields = ('id', 'userId', 'vehicle', 'parts', 'contactInfo', 'status', 'createdAt', 'updatedAt')
