from unittest.mock import MagicMock, patch

import requests
from django.test import TestCase, override_settings

from api.storage import Storage
from apps.notifications.dispatch import dispatch
from apps.notifications.email import EmailResult, EmailService
from asiatek.site_config import SiteConfig, resolve_base_url


def make_config(**overrides):
    values = dict(
        base_url='https://asiatek.pro',
        resend_api_key='re_test_key',
        resend_api_url='https://api.resend.com/emails',
        email_from_address='',
        order_notification_email='orders-inbox@example.com',
        admin_notification_email='admin-inbox@example.com',
    )
    values.update(overrides)
    return SiteConfig(**values)


def ok_response():
    response = MagicMock(status_code=200)
    response.json.return_value = {'id': 'email-id'}
    return response


class EmailServiceTest(TestCase):
    "Отправка писем через Resend"

    def setUp(self):
        self.order = Storage.create_order(
            vehicle={'type': 'chinese', 'vin': 'LZZ5BLSJ1AB123456'},
            parts=[{'name': '<b>Фильтр</b>', 'quantity': 1, 'sku': 'F-1'}],
            contact_info={'name': 'Иван', 'phone': '9001234567', 'countryCode': '+7',
                          'email': 'ivan@example.com', 'comments': '<script>alert(1)</script>'},
        )

    def test_missing_api_key(self):
        service = EmailService(make_config(resend_api_key=''))

        with patch('apps.notifications.email.requests.post') as post:
            result = service.send_order_confirmation(self.order)

        self.assertEqual(result, EmailResult(False, 'Resend API key not configured.'))
        post.assert_not_called()

    @patch('apps.notifications.email.requests.post')
    def test_order_confirmation_payload(self, post):
        post.return_value = ok_response()

        result = EmailService(make_config()).send_order_confirmation(self.order)

        self.assertTrue(result.success)
        url = post.call_args[0][0]
        kwargs = post.call_args[1]
        payload = kwargs['json']
        self.assertEqual(url, 'https://api.resend.com/emails')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer re_test_key')
        self.assertEqual(kwargs['timeout'], 10)
        self.assertEqual(payload['to'], 'orders-inbox@example.com')
        self.assertEqual(payload['from'], 'orders@asiatek.pro')
        self.assertEqual(payload['reply_to'], 'ivan@example.com')
        self.assertEqual(payload['subject'], f'Новый заказ #{self.order.pk} - Иван')
        self.assertIn('LZZ5BLSJ1AB123456', payload['html'])
        self.assertNotIn('<script>alert(1)</script>', payload['html'])
        self.assertIn('&lt;b&gt;Фильтр&lt;/b&gt;', payload['html'])

    @patch('apps.notifications.email.requests.post')
    def test_password_reset_link(self, post):
        post.return_value = ok_response()
        user = Storage.create_user(email='ivan@example.com', password_hash='x')
        reset_token = Storage.create_password_reset_token(user.pk, 'f' * 64, self.order.created_at)

        result = EmailService(make_config(email_from_address='site@asiatek.pro')).send_password_reset_email(
            'ivan@example.com', reset_token
        )

        self.assertTrue(result.success)
        payload = post.call_args[1]['json']
        self.assertEqual(payload['to'], 'ivan@example.com')
        self.assertEqual(payload['from'], 'site@asiatek.pro')
        self.assertIn(f"https://asiatek.pro/auth/reset-password?token={'f' * 64}", payload['html'])
        self.assertNotIn('reply_to', payload)

    @patch('apps.notifications.email.requests.post')
    def test_contact_notification(self, post):
        post.return_value = ok_response()
        message = Storage.create_contact_message(
            name='Ivan', phone='+7 900 1234567', country_code='+7',
            message='Нужна помощь с запчастями для BMW',
        )

        result = EmailService(make_config()).send_contact_form_notification(message)

        self.assertTrue(result.success)
        payload = post.call_args[1]['json']
        self.assertEqual(payload['to'], 'admin-inbox@example.com')
        self.assertEqual(payload['from'], 'contact-form@asiatek.pro')
        self.assertEqual(payload['subject'], 'Новое сообщение от Ivan')
        self.assertNotIn('reply_to', payload)
        self.assertIn('Нужна помощь с запчастями для BMW', payload['html'])

    @patch('apps.notifications.email.requests.post')
    def test_api_error_becomes_failed_result(self, post):
        post.return_value = MagicMock(status_code=422)
        post.return_value.json.return_value = {'message': 'Invalid `to` field'}

        result = EmailService(make_config()).send_order_confirmation(self.order)

        self.assertEqual(result, EmailResult(False, 'Invalid `to` field'))

    @patch('apps.notifications.email.requests.post', side_effect=requests.ConnectionError('no route'))
    def test_network_error_becomes_failed_result(self, post):
        result = EmailService(make_config()).send_order_confirmation(self.order)

        self.assertFalse(result.success)
        self.assertIn('no route', result.error)


class DispatchTest(TestCase):
    "Фоновая отправка уведомлений"

    @override_settings(NOTIFICATIONS_EAGER=True)
    def test_eager_mode_runs_inline_and_logs_failure(self):
        with self.assertLogs('apps.notifications.dispatch', level='ERROR') as logs:
            result = dispatch('test', lambda: EmailResult(False, 'nope'))

        self.assertEqual(result, EmailResult(False, 'nope'))
        self.assertIn('nope', logs.output[0])

    @override_settings(NOTIFICATIONS_EAGER=True)
    def test_exceptions_are_logged_not_raised(self):
        def explode():
            raise RuntimeError('kaboom')

        with self.assertLogs('apps.notifications.dispatch', level='ERROR') as logs:
            result = dispatch('test', explode)

        self.assertIsNone(result)
        self.assertIn('test', logs.output[0])

    @override_settings(NOTIFICATIONS_EAGER=False)
    def test_background_mode_returns_future(self):
        future = dispatch('test', lambda: EmailResult(True))

        self.assertEqual(future.result(timeout=5), EmailResult(True))


class BaseUrlTest(TestCase):
    "Выбор публичного адреса сайта"

    def test_public_base_url_wins(self):
        self.assertEqual(resolve_base_url('https://example.com/', 'replit.dev'), 'https://example.com')

    def test_replit_url_gets_https(self):
        self.assertEqual(resolve_base_url('', 'my-app.replit.dev/'), 'https://my-app.replit.dev')

    def test_default_domain(self):
        with self.assertLogs('asiatek.site_config', level='ERROR'):
            self.assertEqual(resolve_base_url('  ', None), 'https://asiatek.pro')
