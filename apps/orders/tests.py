from unittest.mock import patch

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.test import TestCase

from api.storage import Storage
from apps.notifications.email import EmailResult
from apps.orders.models import Orders
from apps.users.models import Users

SESSION_COOKIE = settings.SESSION_COOKIE_NAME


def order_payload(**overrides):
    payload = {
        'vehicle': {'type': 'chinese', 'make': 'Howo', 'model': 'A7', 'year': 2019},
        'parts': [{'name': 'Тормозные колодки', 'quantity': 2}],
        'contactInfo': {'name': 'Иван', 'phone': '9001234567', 'countryCode': '+7'},
    }
    payload.update(overrides)
    return payload


@patch('apps.notifications.email.EmailService.send_order_confirmation', return_value=EmailResult(True))
class UserOrderTest(TestCase):
    "Заказы авторизованного пользователя"

    def setUp(self):
        self.user = Storage.create_user(
            email='ivan@example.com', password_hash=make_password('secret123'),
            full_name='Иван Петров', phone='9001112233', country_code='+7', city='Москва',
        )
        self.client.post('/api/login', {
            'email': 'ivan@example.com', 'password': 'secret123',
        }, content_type='application/json')

    def test_create_order_stamps_user_and_sends_email(self, send_mock):
        response = self.client.post('/api/orders', order_payload(), content_type='application/json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['userId'], self.user.pk)
        self.assertEqual(data['status'], 'new')
        self.assertEqual(data['parts'][0]['quantity'], 2)

        send_mock.assert_called_once()
        self.assertEqual(send_mock.call_args[0][0].pk, data['id'])

    def test_contact_info_falls_back_to_profile(self, send_mock):
        response = self.client.post('/api/orders', order_payload(contactInfo={}), content_type='application/json')

        self.assertEqual(response.status_code, 201)
        contact = response.json()['contactInfo']
        self.assertEqual(contact['name'], 'Иван Петров')
        self.assertEqual(contact['phone'], '9001112233')
        self.assertEqual(contact['countryCode'], '+7')
        self.assertEqual(contact['email'], 'ivan@example.com')
        self.assertEqual(contact['city'], 'Москва')

    def test_missing_profile_values_become_placeholders(self, send_mock):
        bare = Storage.create_user(email='bare@example.com', password_hash=make_password('secret123'))
        self.client.post('/api/logout')
        self.client.post('/api/login', {
            'email': 'bare@example.com', 'password': 'secret123',
        }, content_type='application/json')

        response = self.client.post('/api/orders', order_payload(contactInfo={}), content_type='application/json')

        self.assertEqual(response.status_code, 201)
        contact = response.json()['contactInfo']
        self.assertEqual(contact['name'], 'N/A')
        self.assertEqual(contact['phone'], 'N/A')
        self.assertEqual(response.json()['userId'], bare.pk)

    def test_empty_parts_is_validation_error(self, send_mock):
        response = self.client.post('/api/orders', order_payload(parts=[]), content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('parts', response.json()['errors'])
        self.assertFalse(Orders.objects.exists())
        send_mock.assert_not_called()

    def test_invalid_vehicle_type(self, send_mock):
        response = self.client.post('/api/orders', order_payload(vehicle={'type': 'tractor'}),
                                    content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_email_failure_does_not_fail_order(self, send_mock):
        send_mock.return_value = EmailResult(False, 'Resend API error')

        response = self.client.post('/api/orders', order_payload(), content_type='application/json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(Orders.objects.count(), 1)

    def test_list_orders_newest_first(self, send_mock):
        first = self.client.post('/api/orders', order_payload(), content_type='application/json').json()
        second = self.client.post('/api/orders', order_payload(), content_type='application/json').json()
        Storage.create_order(vehicle={'type': 'passenger'}, parts=[{'name': 'x', 'quantity': 1}],
                             contact_info={'name': 'Чужой'})

        response = self.client.get('/api/orders')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([order['id'] for order in response.json()], [second['id'], first['id']])

    def test_order_detail_rules(self, send_mock):
        own = self.client.post('/api/orders', order_payload(), content_type='application/json').json()
        stranger = Storage.create_user(email='other@example.com', password_hash=make_password('secret123'))
        foreign = Storage.create_order(vehicle={'type': 'passenger'}, parts=[{'name': 'x', 'quantity': 1}],
                                       contact_info={'name': 'Чужой'}, user=stranger)

        self.assertEqual(self.client.get(f"/api/orders/{own['id']}").status_code, 200)
        self.assertEqual(self.client.get(f'/api/orders/{foreign.pk}').status_code, 403)
        self.assertEqual(self.client.get('/api/orders/999999').status_code, 404)

        bad_id = self.client.get('/api/orders/abc')
        self.assertEqual(bad_id.status_code, 400)
        self.assertEqual(bad_id.json()['message'], 'Неверный ID заказа')

    def test_non_object_body_is_validation_error(self, send_mock):
        for body in ([], '"text"'):
            with self.subTest(body=body):
                response = self.client.post('/api/orders', body, content_type='application/json')
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()['message'], 'Ошибка валидации данных заказа')

        self.assertFalse(Orders.objects.exists())
        send_mock.assert_not_called()

    def test_orders_require_session(self, send_mock):
        self.client.post('/api/logout')

        self.assertEqual(self.client.get('/api/orders').status_code, 401)
        self.assertEqual(self.client.get('/api/orders/1').status_code, 401)
        response = self.client.post('/api/orders', order_payload(), content_type='application/json')
        self.assertEqual(response.status_code, 401)
        self.assertFalse(Orders.objects.exists())


@patch('apps.notifications.email.EmailService.send_order_confirmation', return_value=EmailResult(True))
class GuestOrderTest(TestCase):
    "Гостевой заказ с необязательным созданием аккаунта"

    def test_guest_order_without_account_creates_no_user(self, send_mock):
        payload = order_payload(contactInfo={
            'name': 'Гость', 'phone': '9001234567', 'countryCode': '+7', 'email': 'guest@example.com',
        })

        response = self.client.post('/api/guest-order', payload, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['message'], 'Order placed successfully as guest.')
        self.assertNotIn('user', data)
        self.assertIsNone(data['order']['userId'])
        self.assertFalse(Users.objects.exists())
        self.assertNotIn(SESSION_COOKIE, response.cookies)
        send_mock.assert_called_once()

    def test_guest_order_with_account_creates_user_order_and_session(self, send_mock):
        payload = order_payload(
            contactInfo={'name': 'Пётр', 'phone': '9001234567', 'countryCode': '+7',
                         'email': 'petr@example.com', 'city': 'Казань'},
            createAccount=True,
            password='secret123',
        )

        response = self.client.post('/api/guest-order', payload, content_type='application/json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['message'], 'Заказ размещен и аккаунт успешно создан.')
        self.assertEqual(data['user']['email'], 'petr@example.com')
        self.assertNotIn('password', data['user'])
        self.assertEqual(Users.objects.count(), 1)
        self.assertEqual(Orders.objects.count(), 1)
        self.assertEqual(Orders.objects.get().user_id, data['user']['id'])
        self.assertIn(SESSION_COOKIE, response.cookies)

        me = self.client.get('/api/user')
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['city'], 'Казань')

    def test_existing_email_conflicts(self, send_mock):
        Storage.create_user(email='taken@example.com', password_hash=make_password('secret123'))
        payload = order_payload(
            contactInfo={'name': 'Пётр', 'phone': '9001234567', 'countryCode': '+7', 'email': 'taken@example.com'},
            createAccount=True,
            password='secret123',
        )

        response = self.client.post('/api/guest-order', payload, content_type='application/json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['field'], 'email')
        self.assertFalse(Orders.objects.exists())
        self.assertEqual(Users.objects.count(), 1)

    def test_email_taken_between_check_and_insert_conflicts(self, send_mock):
        "дубликат, проскочивший проверку, отдаёт тот же ответ 409"
        Storage.create_user(email='race@example.com', password_hash=make_password('secret123'))
        payload = order_payload(
            contactInfo={'name': 'Пётр', 'phone': '1', 'countryCode': '+7', 'email': 'race@example.com'},
            createAccount=True,
            password='secret123',
        )

        with patch('api.storage.Storage.get_user_by_email', return_value=None):
            response = self.client.post('/api/guest-order', payload, content_type='application/json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['field'], 'email')
        self.assertEqual(Users.objects.count(), 1)
        self.assertFalse(Orders.objects.exists())
        send_mock.assert_not_called()

    def test_non_object_body_is_validation_error(self, send_mock):
        response = self.client.post('/api/guest-order', [], content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Orders.objects.exists())

    def test_account_requires_email_and_password(self, send_mock):
        cases = [
            order_payload(createAccount=True, password='secret123'),
            order_payload(
                contactInfo={'name': 'Пётр', 'phone': '1', 'countryCode': '+7', 'email': 'p@example.com'},
                createAccount=True, password='123',
            ),
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                response = self.client.post('/api/guest-order', payload, content_type='application/json')
                self.assertEqual(response.status_code, 400)

        self.assertFalse(Users.objects.exists())
        self.assertFalse(Orders.objects.exists())

    def test_invalid_contact_email(self, send_mock):
        payload = order_payload(contactInfo={
            'name': 'Гость', 'phone': '1', 'countryCode': '+7', 'email': 'not-an-email',
        })

        response = self.client.post('/api/guest-order', payload, content_type='application/json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('contactInfo', response.json()['errors'])
