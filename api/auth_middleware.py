# api/auth_middleware.py
from apps.users.decorators import SESSION_USER_KEY


class SessionUserMiddleware:
    """
    Middleware для сессионной авторизации.
    Добавляет в request id пользователя из сессии (или None)
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        session = getattr(request, 'session', None)
        request.session_user_id = session.get(SESSION_USER_KEY) if session is not None else None

        response = self.get_response(request)
        return response
