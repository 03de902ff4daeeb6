# apps/contact/views.py
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from api.storage import Storage
from apps.notifications.dispatch import dispatch
from apps.notifications.email import email_service
from .serializers import ContactMessageSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
def contact(request):
    """Сохраняет сообщение и уведомляет администратора в фоне"""
    serializer = ContactMessageSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            "message": "Ошибка валидации данных",
            "errors": serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    contact_message = Storage.create_contact_message(
        name=data['name'],
        phone=data['phone'],
        country_code=data['countryCode'],
        message=data['message'],
        email=data.get('email'),
    )
    logger.info(f"[CONTACT] Message {contact_message.pk} received from {contact_message.name}")

    dispatch(
        f"contact notification #{contact_message.pk}",
        email_service().send_contact_form_notification,
        contact_message,
    )
    return Response({"message": "Сообщение успешно отправлено"}, status=status.HTTP_201_CREATED)
