# api/exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Ответы об ошибках в формате {"message": ...}.
    Необработанные исключения логируются со стеком и превращаются в 500.
    """
    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown'

    if response is None:
        logger.error(f"[API] Unhandled error in {view_name}: {exc}", exc_info=exc)
        return Response(
            {'message': 'Внутренняя ошибка сервера'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        response.data = {'message': str(data['detail'])}
    else:
        response.data = {'message': 'Ошибка валидации данных', 'errors': data}
    return response
