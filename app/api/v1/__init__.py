from fastapi import APIRouter
from app.api.v1 import auth, activities, categories, clients, transactions, bookings, contracts

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
