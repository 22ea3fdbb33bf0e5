import os
import logging
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from pymongo.errors import PyMongoError

from auth import get_actor, role_required
from database import db, DatabaseUnavailable, MongoGateway, get_gateway
from errors import OrderingError
from notifications import MailNotifier
from orders import OrderService
from policy import Actor
from schemas import OrderStatus, UserRole

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Food Ordering API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONTEND_URL", "http://localhost:3001")],
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Authorization", "X-User-Id"],
)

# Built once at startup and shared by every request
notifier = MailNotifier.from_env()


def get_notifier() -> MailNotifier:
    return notifier


def get_order_service(gateway: MongoGateway = Depends(get_gateway), mailer: MailNotifier = Depends(get_notifier)) -> OrderService:
    return OrderService(gateway, mailer)


@app.exception_handler(OrderingError)
async def handle_ordering_error(request: Request, exc: OrderingError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(DatabaseUnavailable)
async def handle_database_unavailable(request: Request, exc: DatabaseUnavailable):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ===================== Public Endpoints =====================
@app.get("/")
def root():
    return {"message": "Food Ordering API running"}


@app.get("/test")
def diagnostics():
    response = {"database": "not configured", "collections": [], "mail": "configured" if notifier.enabled else "disabled"}
    if db is not None:
        try:
            response["collections"] = db.list_collection_names()
            response["database"] = "connected"
        except PyMongoError as e:
            response["database"] = f"error: {str(e)[:80]}"
    return response


# ===================== Orders =====================
class CreateOrderRequest(BaseModel):
    meal_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


@app.post("/orders", status_code=201)
def create_order(payload: CreateOrderRequest,
                 actor: Actor = Depends(role_required(UserRole.CUSTOMER)),
                 service: OrderService = Depends(get_order_service)):
    return service.create_order(payload.meal_id, payload.quantity, actor.id)


@app.get("/orders")
def list_orders(actor: Actor = Depends(get_actor), service: OrderService = Depends(get_order_service)):
    return service.list_orders(actor)


@app.get("/orders/{order_id}")
def get_order(order_id: str, actor: Actor = Depends(get_actor), service: OrderService = Depends(get_order_service)):
    return service.get_order(order_id, actor)


@app.patch("/orders/{order_id}/status")
def update_order_status(order_id: str, payload: UpdateOrderStatusRequest,
                        actor: Actor = Depends(get_actor),
                        service: OrderService = Depends(get_order_service)):
    return service.update_status(order_id, payload.status, actor)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
