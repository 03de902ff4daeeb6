from rest_framework import serializers

from .models import Users


def blank_to_none(attrs):
    """Пустая строка в поле профиля - то же, что null"""
    return {key: (None if value == '' else value) for key, value in attrs.items()}


class UserSerializer(serializers.ModelSerializer):
    """Публичное представление пользователя (без хеша пароля)"""
    fullName = serializers.CharField(source='full_name', read_only=True)
    countryCode = serializers.CharField(source='country_code', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Users
        fields = ('id', 'email', 'fullName', 'phone', 'countryCode', 'city', 'createdAt')


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Неверный формат email'})
    password = serializers.CharField(
        write_only=True, min_length=6, trim_whitespace=False,
        error_messages={'min_length': 'Пароль должен содержать минимум 6 символов'}
    )
    fullName = serializers.CharField(source='full_name', required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    countryCode = serializers.CharField(source='country_code', required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_email(self, value):
        return value.strip()

    def validate(self, attrs):
        return blank_to_none(attrs)


class ProfileUpdateSerializer(serializers.Serializer):
    """Все поля необязательны; null или пустая строка очищают поле"""
    fullName = serializers.CharField(source='full_name', required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    countryCode = serializers.CharField(source='country_code', required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        return blank_to_none(attrs)
