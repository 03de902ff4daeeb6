# apps/orders/views.py
import logging

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from api.storage import Storage
from apps.notifications.dispatch import dispatch
from apps.notifications.email import email_service
from apps.users.decorators import login_user, request_payload, require_session_user
from apps.users.serializers import UserSerializer
from .serializers import GuestOrderSerializer, OrderPayloadSerializer, OrderSerializer

logger = logging.getLogger(__name__)


def contact_info_with_profile(contact_info, user):
    """Незаполненные контакты берутся из профиля пользователя"""
    if not isinstance(contact_info, dict):
        contact_info = {}
    return {
        'name': contact_info.get('name') or user.full_name or 'N/A',
        'email': contact_info.get('email') or user.email or '',
        'phone': contact_info.get('phone') or user.phone or 'N/A',
        'countryCode': contact_info.get('countryCode') or user.country_code or 'N/A',
        'city': contact_info.get('city') or user.city or '',
        'comments': contact_info.get('comments') or '',
    }


def notify_order_created(order):
    dispatch(f"order confirmation #{order.pk}", email_service().send_order_confirmation, order)


def create_user_order(request):
    user = request.current_user
    body = request_payload(request)
    payload = OrderPayloadSerializer(data={
        'vehicle': body.get('vehicle'),
        'parts': body.get('parts'),
        'contactInfo': contact_info_with_profile(body.get('contactInfo'), user),
    })
    if not payload.is_valid():
        logger.warning(f"[ORDERS] Validation failed for user {user.pk}: {payload.errors}")
        return Response({
            "message": "Ошибка валидации данных заказа",
            "errors": payload.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    data = payload.validated_data
    order = Storage.create_order(
        vehicle=data['vehicle'],
        parts=data['parts'],
        contact_info=data['contactInfo'],
        user=user,
    )
    notify_order_created(order)

    return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@require_session_user
def orders(request):
    """GET - заказы текущего пользователя (новые первыми), POST - новый заказ"""
    if request.method == 'POST':
        return create_user_order(request)

    user_orders = Storage.get_orders_by_user_id(request.current_user.pk)
    return Response(OrderSerializer(user_orders, many=True).data)


@api_view(['GET'])
@require_session_user
def order_detail(request, order_id):
    try:
        order_id = int(order_id)
    except (TypeError, ValueError):
        return Response({"message": "Неверный ID заказа"}, status=status.HTTP_400_BAD_REQUEST)

    order = Storage.get_order_by_id(order_id)
    if order is None:
        return Response({"message": "Заказ не найден"}, status=status.HTTP_404_NOT_FOUND)

    if order.user_id != request.current_user.pk:
        logger.warning(
            f"[ORDERS] User {request.current_user.pk} tried to access order {order.pk} of user {order.user_id}"
        )
        return Response({"message": "У вас нет доступа к этому заказу"}, status=status.HTTP_403_FORBIDDEN)

    return Response(OrderSerializer(order).data)


def email_conflict_response():
    return Response({
        "message": (
            "Пользователь с таким email уже существует. Пожалуйста, войдите "
            "или оформите заказ без создания аккаунта."
        ),
        "field": "email"
    }, status=status.HTTP_409_CONFLICT)


@api_view(['POST'])
def guest_order(request):
    """
    Заказ без авторизации. При createAccount=true создаёт аккаунт,
    привязывает к нему заказ и сразу авторизует пользователя.
    Все данные проверяются до первой записи в БД.
    """
    payload = GuestOrderSerializer(data=request.data)
    if not payload.is_valid():
        logger.warning(f"[GUEST_ORDER] Validation failed: {payload.errors}")
        return Response({
            "message": "Ошибка валидации данных гостевого заказа",
            "errors": payload.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    data = payload.validated_data
    contact_info = data['contactInfo']
    email = (contact_info.get('email') or '').strip()

    new_user = None
    if data['createAccount']:
        if Storage.get_user_by_email(email):
            logger.warning(f"[GUEST_ORDER] Account creation failed: email {email} already exists")
            return email_conflict_response()

        try:
            new_user = Storage.create_user(
                email=email,
                password_hash=make_password(data['password']),
                full_name=contact_info.get('name') or None,
                phone=contact_info.get('phone') or None,
                country_code=contact_info.get('countryCode') or None,
                city=contact_info.get('city') or None,
            )
        except IntegrityError:
            logger.warning(f"[GUEST_ORDER] Account creation failed: email {email} taken concurrently")
            return email_conflict_response()
        logger.info(f"[GUEST_ORDER] Created user {new_user.pk} during guest checkout")

    order = Storage.create_order(
        vehicle=data['vehicle'],
        parts=data['parts'],
        contact_info=contact_info,
        user=new_user,
    )
    notify_order_created(order)

    if new_user is None:
        return Response({
            "order": OrderSerializer(order).data,
            "message": "Order placed successfully as guest."
        }, status=status.HTTP_201_CREATED)

    login_user(request, new_user)
    logger.info(f"[GUEST_ORDER] Auto-logged in user {new_user.pk}")
    return Response({
        "user": UserSerializer(new_user).data,
        "order": OrderSerializer(order).data,
        "message": "Заказ размещен и аккаунт успешно создан."
    }, status=status.HTTP_201_CREATED)
