# apps/users/decorators.py
from functools import wraps

from django.http import JsonResponse

from apps.users.models import Users

SESSION_USER_KEY = 'user_id'


def get_user_from_request(request):
    """Возвращает пользователя текущей сессии или None"""
    # Сначала смотрим, что положил SessionUserMiddleware
    user_id = getattr(request, 'session_user_id', None)
    if user_id is None:
        session = getattr(request, 'session', None)
        user_id = session.get(SESSION_USER_KEY) if session is not None else None

    if not user_id:
        return None

    try:
        return Users.objects.get(pk=user_id)
    except Users.DoesNotExist:
        return None


def request_payload(request):
    """Тело запроса как словарь; JSON-массив или строка дают пустой словарь"""
    data = getattr(request, 'data', None)
    return data if isinstance(data, dict) else {}


def login_user(request, user):
    """Привязывает пользователя к сессии (с новым ключом сессии)"""
    request.session.cycle_key()
    request.session[SESSION_USER_KEY] = user.pk
    request.session_user_id = user.pk


def logout_user(request):
    request.session.flush()
    request.session_user_id = None


def require_session_user(view_func):
    """Декоратор для проверки авторизации. Кладёт пользователя в request.current_user"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        user = get_user_from_request(request)

        if not user:
            return JsonResponse(
                {"message": "Необходима авторизация"},
                status=401
            )

        request.current_user = user

        return view_func(request, *args, **kwargs)

    return wrapper
