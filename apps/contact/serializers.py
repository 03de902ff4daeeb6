from rest_framework import serializers


class ContactMessageSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, error_messages={'blank': 'Имя обязательно'})
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True,
                                   error_messages={'invalid': 'Неверный формат email'})
    phone = serializers.CharField(max_length=50, error_messages={'blank': 'Телефон обязателен'})
    countryCode = serializers.CharField(max_length=10, error_messages={'blank': 'Код страны обязателен'})
    message = serializers.CharField(
        min_length=10,
        error_messages={'min_length': 'Сообщение должно содержать минимум 10 символов'}
    )
