"""
Слой доступа к данным: пользователи, заказы, сообщения, токены сброса пароля
"""
import logging
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.contact.models import ContactMessages
from apps.orders.models import Orders
from apps.users.models import PasswordResetTokens, Users

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('full_name', 'phone', 'country_code', 'city')


class Storage:
    """CRUD-операции поверх ORM. Каждая операция - один запрос на запись."""

    # --- Пользователи ---

    @staticmethod
    def get_user(user_id) -> Optional[Users]:
        try:
            return Users.objects.get(pk=user_id)
        except Users.DoesNotExist:
            return None

    @staticmethod
    def get_user_by_email(email) -> Optional[Users]:
        if not email:
            return None
        return Users.objects.filter(email__iexact=email.strip()).first()

    @staticmethod
    def create_user(email, password_hash, full_name=None, phone=None,
                    country_code=None, city=None) -> Users:
        # хеш пароля в лог не пишем
        logger.info(f"[STORAGE] Creating user: email={email}")
        # отдельный savepoint на случай дубликата email
        with transaction.atomic():
            user = Users.objects.create(
                email=email,
                password_hash=password_hash,
                full_name=full_name,
                phone=phone,
                country_code=country_code,
                city=city,
            )
        logger.info(f"[STORAGE] User created: id={user.pk}, email={user.email}")
        return user

    @staticmethod
    def update_user_profile(user_id, data) -> Optional[Users]:
        """
        Обновляет только переданные поля профиля.
        None в значении очищает поле; пустой словарь возвращает текущую запись.
        """
        user = Storage.get_user(user_id)
        if user is None:
            return None

        changed = [field for field in PROFILE_FIELDS if field in data]
        if not changed:
            logger.warning(f"[STORAGE] No data provided to update profile for user {user_id}")
            return user

        for field in changed:
            setattr(user, field, data[field])
        user.save(update_fields=changed)
        logger.info(f"[STORAGE] Profile updated for user {user_id}: {', '.join(changed)}")
        return user

    @staticmethod
    def update_user_password(user_id, password_hash):
        updated = Users.objects.filter(pk=user_id).update(password_hash=password_hash)
        logger.info(f"[STORAGE] Password updated for user {user_id} (rows: {updated})")

    # --- Заказы ---

    @staticmethod
    def create_order(vehicle, parts, contact_info, user=None, status='new') -> Orders:
        order = Orders.objects.create(
            user=user,
            vehicle=vehicle,
            parts=parts,
            contact_info=contact_info,
            status=status,
        )
        logger.info(
            f"[STORAGE] Order created: id={order.pk}, user_id={order.user_id if order.user_id else 'NULL'}"
        )
        return order

    @staticmethod
    def get_order_by_id(order_id) -> Optional[Orders]:
        try:
            return Orders.objects.get(pk=order_id)
        except Orders.DoesNotExist:
            return None

    @staticmethod
    def get_orders_by_user_id(user_id) -> List[Orders]:
        return list(Orders.objects.filter(user_id=user_id).order_by('-created_at', '-pk'))

    # --- Сообщения с формы контактов ---

    @staticmethod
    def create_contact_message(name, phone, country_code, message, email=None) -> ContactMessages:
        contact_message = ContactMessages.objects.create(
            name=name,
            email=email or None,
            phone=phone,
            country_code=country_code,
            message=message,
        )
        logger.info(f"[STORAGE] Contact message saved: id={contact_message.pk}")
        return contact_message

    # --- Токены сброса пароля ---

    @staticmethod
    def create_password_reset_token(user_id, token, expires_at) -> PasswordResetTokens:
        reset_token = PasswordResetTokens.objects.create(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
            used=False,
        )
        logger.info(
            f"[STORAGE] Password reset token created: id={reset_token.pk}, user_id={user_id}, "
            f"expires_at={expires_at.isoformat()}"
        )
        return reset_token

    @staticmethod
    def get_password_reset_token(token) -> Optional[PasswordResetTokens]:
        return PasswordResetTokens.objects.filter(token=token).first()

    @staticmethod
    def mark_token_as_used(token):
        updated = PasswordResetTokens.objects.filter(token=token).update(used=True)
        logger.info(f"[STORAGE] Token {token[:5]}... marked as used (rows: {updated})")

    @staticmethod
    def delete_expired_tokens() -> int:
        deleted, _ = PasswordResetTokens.objects.filter(expires_at__lte=timezone.now()).delete()
        logger.info(f"[STORAGE] Deleted {deleted} expired password reset tokens")
        return deleted
