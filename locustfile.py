from faker import Faker
from locust import task, TaskSet, SequentialTaskSet, HttpUser, constant_throughput
import random

fake = Faker("ru_RU")

BRANDS = ["sitrak", "howo", "shacman", "faw", "dfsk", "foton", "jac", "volvo", "scania", "kia"]


def phone_number():
    return f"{random.randint(900, 999)}{random.randint(1000000, 9999999)}"


def order_payload():
    return {
        "vehicle": {
            "type": random.choice(["passenger", "commercial", "chinese"]),
            "make": random.choice(BRANDS).upper(),
            "model": fake.bothify("??-###"),
            "year": random.randint(2005, 2024),
            "vin": fake.bothify("?????????????????").upper(),
        },
        "parts": [
            {"name": fake.word(), "quantity": random.randint(1, 4)}
            for _ in range(random.randint(1, 3))
        ],
        "contactInfo": {
            "name": fake.first_name(),
            "phone": phone_number(),
            "countryCode": "+7",
            "city": fake.city(),
        },
    }


class CustomersRegTest(SequentialTaskSet):  # последовательная регистрация и заказ
    def on_start(self):
        self.client.get("/auth")

    @task(1)
    def register_user(self):
        register_data = {
            "email": f"{fake.user_name()}{random.randint(1000, 9999)}@gmail.com",
            "password": fake.password(length=11),
            "fullName": fake.name(),
            "phone": phone_number(),
            "countryCode": "+7",
            "city": fake.city(),
        }
        self.client.post("/api/register", json=register_data)

    @task(1)
    def view_dashboard(self):
        self.client.get("/dashboard")

    @task(1)
    def create_order(self):
        self.client.post("/api/orders", json=order_payload())

    @task(1)
    def list_orders(self):
        self.client.get("/api/orders")


class PageViewTest(TaskSet):

    @task(8)
    def view_catalog(self):
        self.client.get("/zapchasti")

    @task(6)
    def view_brand(self):
        self.client.get(f"/zapchasti/{random.choice(BRANDS)}", name="/zapchasti/[brand]")

    @task(6)
    def view_homepage(self):
        self.client.get("/")

    @task(2)
    def view_as_bot(self):
        self.client.get("/", headers={"User-Agent": "Googlebot/2.1"}, name="/ (bot)")


class GuestActionsTest(TaskSet):

    @task(3)
    def send_contact_message(self):
        self.client.post("/api/contact", json={
            "name": fake.first_name(),
            "phone": phone_number(),
            "countryCode": "+7",
            "message": fake.text(max_nb_chars=150),
        })

    @task(2)
    def guest_order(self):
        payload = order_payload()
        payload["createAccount"] = False
        self.client.post("/api/guest-order", json=payload)

    @task(1)
    def forgot_password(self):
        self.client.post("/api/forgot-password", json={"email": fake.email()})


class WebsiteUser(HttpUser):
    wait_time = constant_throughput(2)

    tasks = {
        PageViewTest: 5,
        GuestActionsTest: 3,
        CustomersRegTest: 2
    }
