"""
Shared fixtures: an in-memory MongoDB (mongomock) seeded with two customers,
two vendors and their meals, plus a notifier that records instead of mailing.
"""
import mongomock
import pytest

from database import MongoGateway, create_document
from policy import Actor
from schemas import Meal, MealCategory, MealStatus, User, UserRole


class RecordingNotifier:
    """Stands in for MailNotifier. Remembers every send and whether the order
    was already persisted when the send happened."""

    def __init__(self, gateway=None, result=True, error=None):
        self.gateway = gateway
        self.result = result
        self.error = error
        self.sent = []
        self.persisted_at_send = []

    def _record(self, kind, to, order, label=None):
        self.sent.append((kind, to, label))
        if self.gateway is not None:
            self.persisted_at_send.append(self.gateway.find_order(order["_id"]) is not None)
        if self.error is not None:
            raise self.error
        return self.result

    def send_order_invoice(self, to, order):
        return self._record("invoice", to, order)

    def send_order_status_update(self, to, order, label):
        return self._record("status_update", to, order, label)

    def send_delivery_notification(self, to, order):
        return self._record("delivered", to, order)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["food_ordering_test"]


@pytest.fixture
def gateway(mongo_db):
    return MongoGateway(mongo_db)


@pytest.fixture
def notifier(gateway):
    return RecordingNotifier(gateway)


@pytest.fixture
def users(mongo_db):
    people = {
        "customer": User(name="John Doe", email="john@example.com", role=UserRole.CUSTOMER,
                         phone="1234567890", location="City A"),
        "other_customer": User(name="Ada Obi", email="ada@example.com", role=UserRole.CUSTOMER,
                               phone="1112223333", location="City C"),
        "vendor": User(name="Jane Smith", email="jane@example.com", role=UserRole.VENDOR,
                       phone="0987654321", location="City B", restaurant_name="The Great Eats"),
        "other_vendor": User(name="Tunde Bello", email="tunde@example.com", role=UserRole.VENDOR,
                             phone="5556667777", location="City D", restaurant_name="Mama Put"),
    }
    return {key: create_document(mongo_db, "user", user) for key, user in people.items()}


@pytest.fixture
def actors(users):
    return {
        "customer": Actor(id=users["customer"], role=UserRole.CUSTOMER, email="john@example.com"),
        "other_customer": Actor(id=users["other_customer"], role=UserRole.CUSTOMER, email="ada@example.com"),
        "vendor": Actor(id=users["vendor"], role=UserRole.VENDOR, email="jane@example.com"),
        "other_vendor": Actor(id=users["other_vendor"], role=UserRole.VENDOR, email="tunde@example.com"),
    }


@pytest.fixture
def meals(mongo_db, users):
    return {
        "burger": create_document(mongo_db, "meal", Meal(
            vendor_id=users["vendor"], name="Burger", description="Tasty beef burger",
            price=10.0, categories=[MealCategory.LOCAL])),
        "sold_out": create_document(mongo_db, "meal", Meal(
            vendor_id=users["vendor"], name="Egusi Soup", description="With pounded yam",
            price=7.5, categories=[MealCategory.SOUP, MealCategory.SWALLOW],
            status=MealStatus.OUT_OF_STOCK)),
        "pie": create_document(mongo_db, "meal", Meal(
            vendor_id=users["other_vendor"], name="Meat Pie", description="Flaky pastry",
            price=2.5, categories=[MealCategory.PASTRIES])),
    }


@pytest.fixture
def notifier_factory(gateway):
    def make(**kwargs):
        return RecordingNotifier(gateway, **kwargs)
    return make
