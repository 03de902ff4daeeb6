# apps/users/views.py
import logging

from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.views import APIView

from api.storage import Storage
from apps.notifications.dispatch import dispatch
from apps.notifications.email import email_service
from .decorators import login_user, logout_user, request_payload, require_session_user
from .serializers import ProfileUpdateSerializer, RegisterSerializer, UserSerializer
from .tokens import (
    consume_password_reset_token,
    generate_password_reset_token,
    verify_password_reset_token,
)

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "Если аккаунт с указанным email существует, "
    "на него будут отправлены инструкции по сбросу пароля."
)
DUPLICATE_EMAIL_MESSAGE = "Пользователь с таким email уже существует"
INVALID_TOKEN_MESSAGE = "Недействительный или просроченный токен"


class RegisterView(APIView):
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({
                "message": "Ошибка валидации данных",
                "errors": serializer.errors
            }, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        if Storage.get_user_by_email(data['email']):
            return Response({"message": DUPLICATE_EMAIL_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = Storage.create_user(
                email=data['email'],
                password_hash=make_password(data['password']),
                full_name=data.get('full_name'),
                phone=data.get('phone'),
                country_code=data.get('country_code'),
                city=data.get('city'),
            )
        except IntegrityError:
            # email заняли между проверкой и вставкой
            logger.warning(f"[AUTH] Concurrent registration for {data['email']}")
            return Response({"message": DUPLICATE_EMAIL_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

        login_user(request, user)
        logger.info(f"[AUTH] Registered and logged in user {user.pk}")

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    def post(self, request):
        payload = request_payload(request)
        email = payload.get('email')
        password = payload.get('password')

        if not email or not password or not isinstance(email, str) or not isinstance(password, str):
            return Response({"message": "Email и пароль обязательны"}, status=status.HTTP_400_BAD_REQUEST)

        user = Storage.get_user_by_email(email)
        # Одинаковый ответ для неизвестного email и неверного пароля
        if user is None or not check_password(password, user.password_hash):
            logger.info("[AUTH] Failed login attempt")
            return Response({"message": "Неверный email или пароль"}, status=status.HTTP_400_BAD_REQUEST)

        login_user(request, user)
        logger.info(f"[AUTH] User {user.pk} logged in")
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def logout(request):
    logout_user(request)
    return Response(status=status.HTTP_200_OK)


@api_view(['GET'])
@require_session_user
def current_user(request):
    return Response(UserSerializer(request.current_user).data)


@api_view(['PATCH'])
@require_session_user
def update_profile(request):
    """PATCH /api/user/profile - обновляет только переданные поля"""
    serializer = ProfileUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            "message": "Ошибка валидации данных профиля",
            "errors": serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    user = Storage.update_user_profile(request.current_user.pk, serializer.validated_data)
    return Response(UserSerializer(user).data, status=status.HTTP_200_OK)


class ForgotPasswordView(APIView):
    """
    Всегда отвечает одним и тем же сообщением, чтобы нельзя было узнать,
    зарегистрирован ли email. Ошибки генерации токена и отправки письма
    только логируются.
    """
    def post(self, request):
        email = request_payload(request).get('email')
        if not email or not isinstance(email, str):
            return Response(
                {"message": "Email обязателен и должен быть строкой"},
                status=status.HTTP_400_BAD_REQUEST
            )
        email = email.strip()
        if not email:
            return Response({"message": "Email не может быть пустым"}, status=status.HTTP_400_BAD_REQUEST)

        user = Storage.get_user_by_email(email)
        if user is None:
            logger.info("[PASSWORD_RESET] Unknown email, returning masked success")
            return Response({"message": FORGOT_PASSWORD_MESSAGE}, status=status.HTTP_200_OK)

        try:
            reset_token = generate_password_reset_token(user.pk)
        except Exception as e:
            logger.error(f"[PASSWORD_RESET] Token generation failed for user {user.pk}: {e}", exc_info=True)
            return Response({"message": FORGOT_PASSWORD_MESSAGE}, status=status.HTTP_200_OK)

        dispatch(
            f"password reset email for user {user.pk}",
            email_service().send_password_reset_email,
            email,
            reset_token,
        )
        return Response({"message": FORGOT_PASSWORD_MESSAGE}, status=status.HTTP_200_OK)


class VerifyResetTokenView(APIView):
    def post(self, request):
        token = request_payload(request).get('token')
        if not token or not isinstance(token, str):
            return Response(
                {"message": "Токен отсутствует или неверный формат"},
                status=status.HTTP_400_BAD_REQUEST
            )

        if verify_password_reset_token(token) is None:
            return Response({"message": INVALID_TOKEN_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

        return Response({"valid": True}, status=status.HTTP_200_OK)


class ResetPasswordView(APIView):
    def post(self, request):
        payload = request_payload(request)
        token = payload.get('token')
        password = payload.get('password')

        if (not token or not isinstance(token, str)
                or not isinstance(password, str) or len(password) < 6):
            return Response(
                {"message": "Токен и новый пароль (минимум 6 символов) обязательны"},
                status=status.HTTP_400_BAD_REQUEST
            )

        reset_token = verify_password_reset_token(token)
        if reset_token is None:
            return Response({"message": INVALID_TOKEN_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

        user = Storage.get_user(reset_token.user_id)
        if user is None:
            return Response({"message": "Связанный пользователь не найден"}, status=status.HTTP_404_NOT_FOUND)

        Storage.update_user_password(user.pk, make_password(password))
        consume_password_reset_token(token)
        logger.info(f"[PASSWORD_RESET] Password changed for user {user.pk}")

        return Response({"message": "Пароль успешно изменен"}, status=status.HTTP_200_OK)
