from datetime import timedelta
from io import StringIO
from unittest.mock import patch

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from api.storage import Storage
from apps.notifications.email import EmailResult
from apps.users.models import PasswordResetTokens, Users
from apps.users.tokens import generate_password_reset_token, verify_password_reset_token

SESSION_COOKIE = settings.SESSION_COOKIE_NAME


def create_user(email='ivan@example.com', password='secret123', **extra):
    return Storage.create_user(email=email, password_hash=make_password(password), **extra)


class RegisterTest(TestCase):
    "Регистрация через /api/register"

    def test_register_creates_user_and_session(self):
        response = self.client.post('/api/register', {
            'email': 'new@example.com',
            'password': 'secret123',
            'fullName': 'Иван Петров',
            'countryCode': '+7',
            'phone': '9001234567',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['email'], 'new@example.com')
        self.assertEqual(data['fullName'], 'Иван Петров')
        self.assertNotIn('password', data)
        self.assertNotIn('password_hash', data)
        self.assertIn(SESSION_COOKIE, response.cookies)

        user = Users.objects.get(email='new@example.com')
        self.assertTrue(check_password('secret123', user.password_hash))

    def test_duplicate_email_is_rejected_without_new_row(self):
        create_user(email='dup@example.com')

        response = self.client.post('/api/register', {
            'email': 'DUP@example.com',
            'password': 'another123',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Пользователь с таким email уже существует')
        self.assertEqual(Users.objects.count(), 1)

    def test_email_taken_between_check_and_insert(self):
        "дубликат, проскочивший проверку, отдаёт тот же ответ 400"
        create_user(email='race@example.com')

        with patch('api.storage.Storage.get_user_by_email', return_value=None):
            response = self.client.post('/api/register', {
                'email': 'race@example.com',
                'password': 'another123',
            }, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Пользователь с таким email уже существует')
        self.assertEqual(Users.objects.count(), 1)
        self.assertNotIn(SESSION_COOKIE, response.cookies)

    def test_blank_profile_fields_are_stored_as_null(self):
        response = self.client.post('/api/register', {
            'email': 'blank@example.com',
            'password': 'secret123',
            'fullName': '',
            'phone': '',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        self.assertIsNone(response.json()['fullName'])
        self.assertIsNone(Users.objects.get().phone)

    def test_short_password_is_validation_error(self):
        response = self.client.post('/api/register', {
            'email': 'short@example.com',
            'password': '123',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.json()['errors'])
        self.assertFalse(Users.objects.exists())


class LoginLogoutTest(TestCase):
    "Вход, выход и текущий пользователь"

    def setUp(self):
        self.user = create_user()

    def test_login_with_valid_credentials(self):
        response = self.client.post('/api/login', {
            'email': 'Ivan@Example.com',
            'password': 'secret123',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['id'], self.user.pk)
        self.assertIn(SESSION_COOKIE, response.cookies)

        me = self.client.get('/api/user')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['email'], 'ivan@example.com')

    def test_wrong_password_and_unknown_email_look_the_same(self):
        wrong_password = self.client.post('/api/login', {
            'email': 'ivan@example.com', 'password': 'wrong-pass',
        }, content_type='application/json')
        unknown_email = self.client.post('/api/login', {
            'email': 'nobody@example.com', 'password': 'secret123',
        }, content_type='application/json')

        for response in (wrong_password, unknown_email):
            with self.subTest(response=response):
                self.assertEqual(response.status_code, 400)
                self.assertEqual(set(response.json().keys()), {'message'})
                self.assertNotIn(SESSION_COOKIE, response.cookies)

    def test_missing_credentials(self):
        response = self.client.post('/api/login', {'email': 'ivan@example.com'}, content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Email и пароль обязательны')

    def test_logout_ends_session(self):
        self.client.post('/api/login', {
            'email': 'ivan@example.com', 'password': 'secret123',
        }, content_type='application/json')

        response = self.client.post('/api/logout')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get('/api/user').status_code, 401)

    def test_current_user_requires_session(self):
        response = self.client.get('/api/user')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Необходима авторизация')


class ProfileUpdateTest(TestCase):
    "PATCH /api/user/profile"

    def setUp(self):
        self.user = create_user(full_name='Иван', phone='111', city='Москва')
        self.client.post('/api/login', {
            'email': 'ivan@example.com', 'password': 'secret123',
        }, content_type='application/json')

    def test_only_sent_fields_change(self):
        response = self.client.patch('/api/user/profile', {'phone': '222'}, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.phone, '222')
        self.assertEqual(self.user.full_name, 'Иван')
        self.assertEqual(self.user.city, 'Москва')

    def test_null_clears_field(self):
        response = self.client.patch('/api/user/profile', {'city': None}, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()['city'])

    def test_blank_string_clears_any_field(self):
        "пустая строка очищает поле так же, как null"
        response = self.client.patch('/api/user/profile', {
            'fullName': '', 'phone': '', 'countryCode': '', 'city': '',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertIsNone(self.user.full_name)
        self.assertIsNone(self.user.phone)
        self.assertIsNone(self.user.country_code)
        self.assertIsNone(self.user.city)

    def test_empty_payload_returns_current_profile(self):
        response = self.client.patch('/api/user/profile', {}, content_type='application/json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['fullName'], 'Иван')

    def test_requires_session(self):
        self.client.post('/api/logout')
        response = self.client.patch('/api/user/profile', {'phone': '333'}, content_type='application/json')
        self.assertEqual(response.status_code, 401)


@patch('apps.notifications.email.EmailService.send_password_reset_email', return_value=EmailResult(True))
class ForgotPasswordTest(TestCase):
    "Запрос сброса пароля не раскрывает, существует ли email"

    def setUp(self):
        self.user = create_user()

    def test_same_response_for_existing_and_unknown_email(self, send_mock):
        existing = self.client.post('/api/forgot-password', {'email': 'ivan@example.com'},
                                    content_type='application/json')
        unknown = self.client.post('/api/forgot-password', {'email': 'ghost@example.com'},
                                   content_type='application/json')

        self.assertEqual(existing.status_code, 200)
        self.assertEqual(unknown.status_code, 200)
        self.assertEqual(existing.json(), unknown.json())

        self.assertEqual(PasswordResetTokens.objects.filter(user=self.user).count(), 1)
        send_mock.assert_called_once()
        self.assertEqual(send_mock.call_args[0][0], 'ivan@example.com')

    def test_email_failure_is_masked(self, send_mock):
        send_mock.side_effect = RuntimeError('mail API down')

        response = self.client.post('/api/forgot-password', {'email': 'ivan@example.com'},
                                    content_type='application/json')

        self.assertEqual(response.status_code, 200)

    def test_token_generation_failure_is_masked(self, send_mock):
        with patch('apps.users.views.generate_password_reset_token', side_effect=RuntimeError('db')):
            response = self.client.post('/api/forgot-password', {'email': 'ivan@example.com'},
                                        content_type='application/json')

        self.assertEqual(response.status_code, 200)
        send_mock.assert_not_called()

    def test_missing_email(self, send_mock):
        response = self.client.post('/api/forgot-password', {}, content_type='application/json')
        self.assertEqual(response.status_code, 400)

        response = self.client.post('/api/forgot-password', {'email': '   '}, content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Email не может быть пустым')


class ResetTokenTest(TestCase):
    "Жизненный цикл токена: выдан -> проверен -> использован / истёк"

    def setUp(self):
        self.user = create_user()

    def test_token_format_and_expiry(self):
        reset_token = generate_password_reset_token(self.user.pk)

        self.assertEqual(len(reset_token.token), 64)
        self.assertFalse(reset_token.used)
        lifetime = reset_token.expires_at - timezone.now()
        self.assertTrue(timedelta(minutes=59) < lifetime <= timedelta(hours=1))

    def test_verify_valid_token_does_not_consume_it(self):
        reset_token = generate_password_reset_token(self.user.pk)

        for _ in range(2):
            response = self.client.post('/api/verify-reset-token', {'token': reset_token.token},
                                        content_type='application/json')
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json(), {'valid': True})

    def test_verify_rejects_unknown_and_missing_token(self):
        response = self.client.post('/api/verify-reset-token', {'token': 'nope'}, content_type='application/json')
        self.assertEqual(response.status_code, 400)

        response = self.client.post('/api/verify-reset-token', {}, content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_reset_password_accepts_token_only_once(self):
        reset_token = generate_password_reset_token(self.user.pk)

        first = self.client.post('/api/reset-password', {
            'token': reset_token.token, 'password': 'brand-new',
        }, content_type='application/json')
        second = self.client.post('/api/reset-password', {
            'token': reset_token.token, 'password': 'another-one',
        }, content_type='application/json')

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 400)
        self.user.refresh_from_db()
        self.assertTrue(check_password('brand-new', self.user.password_hash))

    def test_expired_token_is_rejected(self):
        Storage.create_password_reset_token(
            self.user.pk, 'a' * 64, timezone.now() - timedelta(hours=1, minutes=1)
        )

        verify = self.client.post('/api/verify-reset-token', {'token': 'a' * 64}, content_type='application/json')
        reset = self.client.post('/api/reset-password', {
            'token': 'a' * 64, 'password': 'brand-new',
        }, content_type='application/json')

        self.assertEqual(verify.status_code, 400)
        self.assertEqual(reset.status_code, 400)
        self.assertIsNone(verify_password_reset_token('a' * 64))

    def test_reset_requires_long_enough_password(self):
        reset_token = generate_password_reset_token(self.user.pk)

        response = self.client.post('/api/reset-password', {
            'token': reset_token.token, 'password': '123',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        reset_token.refresh_from_db()
        self.assertFalse(reset_token.used)


class NonObjectBodyTest(TestCase):
    "JSON-тело, которое не является объектом, - ошибка клиента, а не сервера"

    BODIES = ([], '"text"', '42')

    def post(self, url, body):
        return self.client.post(url, body, content_type='application/json')

    def test_public_endpoints_return_400(self):
        for url in ('/api/register', '/api/login', '/api/forgot-password',
                    '/api/verify-reset-token', '/api/reset-password'):
            for body in self.BODIES:
                with self.subTest(url=url, body=body):
                    response = self.post(url, body)
                    self.assertEqual(response.status_code, 400)
                    self.assertIn('message', response.json())

        self.assertFalse(Users.objects.exists())

    def test_profile_update_returns_400(self):
        create_user(full_name='Иван')
        self.post('/api/login', {'email': 'ivan@example.com', 'password': 'secret123'})

        response = self.client.patch('/api/user/profile', [], content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(Users.objects.get().full_name, 'Иван')


class ClearExpiredTokensTest(TestCase):
    "Команда clear_expired_tokens"

    def test_removes_only_expired_tokens(self):
        user = create_user()
        Storage.create_password_reset_token(user.pk, 'old', timezone.now() - timedelta(minutes=5))
        generate_password_reset_token(user.pk)

        out = StringIO()
        call_command('clear_expired_tokens', stdout=out)

        self.assertEqual(PasswordResetTokens.objects.count(), 1)
        self.assertFalse(PasswordResetTokens.objects.filter(token='old').exists())
        self.assertIn('1', out.getvalue())
