"""
Database Helper Functions

MongoDB helpers and the persistence gateway used by the order engine.
Orders are always returned with their meal, customer and vendor resolved inline.
"""

from pymongo import MongoClient, DESCENDING
from pymongo.database import Database
from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime, timezone
import os
from dotenv import load_dotenv
from typing import Union, Optional, Dict, Any, List
from pydantic import BaseModel

from schemas import Order, OrderStatus

# Load environment variables from .env file
load_dotenv()

_client = None
db = None

database_url = os.getenv("DATABASE_URL")
database_name = os.getenv("DATABASE_NAME")

if database_url and database_name:
    _client = MongoClient(database_url)
    db = _client[database_name]

MEAL_FIELDS = ("_id", "name", "description", "price", "image_url", "status")
CUSTOMER_FIELDS = ("_id", "name", "email", "phone", "location")
VENDOR_FIELDS = ("_id", "name", "restaurant_name", "email", "phone", "location")


class DatabaseUnavailable(RuntimeError):
    pass


def get_database() -> Database:
    if db is None:
        raise DatabaseUnavailable("Database not available. Check DATABASE_URL and DATABASE_NAME environment variables.")
    return db


def _to_dict(data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    return dict(data)


def _object_id(_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(_id)
    except (InvalidId, TypeError):
        return None


# CRUD helpers

def create_document(database: Database, collection_name: str, data: Union[BaseModel, dict]) -> str:
    payload = _to_dict(data)
    now = datetime.now(timezone.utc)
    payload['created_at'] = now
    payload['updated_at'] = now
    result = database[collection_name].insert_one(payload)
    return str(result.inserted_id)


def get_documents(database: Database, collection_name: str, filter_dict: Optional[dict] = None, sort: Optional[list] = None) -> List[dict]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    return [serialize_doc(doc) for doc in cursor]


def get_document_by_id(database: Database, collection_name: str, _id: str) -> Optional[dict]:
    oid = _object_id(_id)
    if oid is None:
        return None
    return serialize_doc(database[collection_name].find_one({"_id": oid}))


def update_document(database: Database, collection_name: str, _id: str, update_data: Dict[str, Any]) -> bool:
    oid = _object_id(_id)
    if oid is None:
        return False
    update = {"$set": _to_dict(update_data)}
    update["$set"]["updated_at"] = datetime.now(timezone.utc)
    result = database[collection_name].update_one({"_id": oid}, update)
    return result.matched_count > 0


# Utility

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return None
    d = dict(doc)
    if "_id" in d:
        d["_id"] = str(d["_id"])  # convert ObjectId to string
    return d


def select_fields(doc: Optional[dict], fields) -> Optional[dict]:
    if doc is None:
        return None
    return {key: doc[key] for key in fields if key in doc}


class MongoGateway:
    """Persistence gateway over a pymongo ``Database``.

    Reads and writes are separate calls; nothing here locks or compares-and-swaps.
    """

    def __init__(self, database: Database):
        self.db = database

    def find_user(self, user_id: str) -> Optional[dict]:
        return get_document_by_id(self.db, "user", user_id)

    def find_meal(self, meal_id: str) -> Optional[dict]:
        return get_document_by_id(self.db, "meal", meal_id)

    def find_order(self, order_id: str) -> Optional[dict]:
        order = get_document_by_id(self.db, "order", order_id)
        return self._resolve(order) if order else None

    def create_order(self, fields: Union[Order, dict]) -> dict:
        order_id = create_document(self.db, "order", fields)
        return self.find_order(order_id)

    def update_order_status(self, order_id: str, status: OrderStatus) -> Optional[dict]:
        if not update_document(self.db, "order", order_id, {"status": OrderStatus(status).value}):
            return None
        return self.find_order(order_id)

    def list_orders(self, filter_dict: dict) -> List[dict]:
        orders = get_documents(self.db, "order", filter_dict, sort=[("created_at", DESCENDING), ("_id", DESCENDING)])
        return [self._resolve(order) for order in orders]

    def _resolve(self, order: dict) -> dict:
        order["meal"] = select_fields(self.find_meal(order["meal_id"]), MEAL_FIELDS)
        order["customer"] = select_fields(self.find_user(order["customer_id"]), CUSTOMER_FIELDS)
        order["vendor"] = select_fields(self.find_user(order["vendor_id"]), VENDOR_FIELDS)
        return order


def get_gateway() -> MongoGateway:
    return MongoGateway(get_database())
