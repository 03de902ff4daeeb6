from unittest.mock import patch

from django.test import TestCase

from apps.contact.models import ContactMessages
from apps.notifications.email import EmailResult


@patch('apps.notifications.email.EmailService.send_contact_form_notification', return_value=EmailResult(True))
class ContactFormTest(TestCase):
    "POST /api/contact"

    def test_message_is_saved_and_admin_notified(self, send_mock):
        response = self.client.post('/api/contact', {
            'name': 'Ivan',
            'phone': '+7 900 1234567',
            'countryCode': '+7',
            'message': 'Нужна помощь с запчастями для BMW',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {'message': 'Сообщение успешно отправлено'})

        saved = ContactMessages.objects.get()
        self.assertEqual(saved.name, 'Ivan')
        self.assertEqual(saved.country_code, '+7')
        self.assertIsNone(saved.email)

        send_mock.assert_called_once()
        self.assertEqual(send_mock.call_args[0][0].pk, saved.pk)

    def test_notification_failure_does_not_fail_request(self, send_mock):
        send_mock.side_effect = RuntimeError('boom')

        response = self.client.post('/api/contact', {
            'name': 'Ivan', 'phone': '1', 'countryCode': '+7',
            'message': 'Достаточно длинное сообщение',
        }, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(ContactMessages.objects.count(), 1)

    def test_validation_errors(self, send_mock):
        cases = {
            'short message': {'name': 'Ivan', 'phone': '1', 'countryCode': '+7', 'message': 'коротко'},
            'no phone': {'name': 'Ivan', 'countryCode': '+7', 'message': 'Достаточно длинное сообщение'},
            'bad email': {'name': 'Ivan', 'phone': '1', 'countryCode': '+7', 'email': 'nope',
                          'message': 'Достаточно длинное сообщение'},
        }
        for label, payload in cases.items():
            with self.subTest(case=label):
                response = self.client.post('/api/contact', payload, content_type='application/json')
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()['message'], 'Ошибка валидации данных')

        self.assertFalse(ContactMessages.objects.exists())
        send_mock.assert_not_called()
