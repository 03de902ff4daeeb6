from django.core.management.base import BaseCommand

from apps.users.tokens import clear_expired_tokens


class Command(BaseCommand):
    help = 'Удаляет истекшие токены восстановления пароля'

    def handle(self, *args, **options):
        result = clear_expired_tokens()
        if result['status'] == 'success':
            self.stdout.write(self.style.SUCCESS(
                f"Удалено истекших токенов: {result['expired_tokens_cleared']}"
            ))
        else:
            self.stderr.write(f"Ошибка очистки токенов: {result['error']}")
