"""
Database Schemas for the Food Ordering API

Each Pydantic model below corresponds to a MongoDB collection.
The collection name is the lowercase class name (e.g., User -> "user").
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, EmailStr


class UserRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    VENDOR = "VENDOR"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class MealCategory(str, Enum):
    SWALLOW = "SWALLOW"
    SOUP = "SOUP"
    NIGERIA_DISH = "NIGERIA_DISH"
    INTERCONTINENTAL_DISH = "INTERCONTINENTAL_DISH"
    PASTRIES = "PASTRIES"
    LOCAL = "LOCAL"


class MealStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class OrderStatus(str, Enum):
    ORDERED = "ORDERED"
    PROCESSING = "PROCESSING"
    DELIVERED = "DELIVERED"


class User(BaseModel):
    name: str = Field(..., description="Full name")
    email: EmailStr = Field(..., description="Unique email address")
    role: UserRole = Field(..., description="Fixed at signup")
    phone: str
    location: str
    gender: Optional[Gender] = None
    username: Optional[str] = None
    restaurant_name: Optional[str] = Field(None, description="Vendors only")
    business_id: Optional[str] = Field(None, description="Vendors only")
    company_phone: Optional[str] = None


class Meal(BaseModel):
    vendor_id: str = Field(..., description="Owning vendor _id, never reassigned")
    name: str
    description: str
    price: float = Field(..., gt=0)
    image_url: str = ""
    categories: List[MealCategory] = Field(..., min_length=1, max_length=3)
    status: MealStatus = MealStatus.IN_STOCK


class Order(BaseModel):
    meal_id: str
    customer_id: str
    vendor_id: str = Field(..., description="Snapshot of meal.vendor_id at creation")
    quantity: int = Field(..., gt=0)
    total_price: float = Field(..., description="Meal price x quantity at creation, never recomputed")
    status: OrderStatus = OrderStatus.ORDERED


"""
Notes:
- Enum fields are stored as their plain string values (model_dump(mode="json")).
- Related documents are referenced by their _id string, never embedded.
"""
