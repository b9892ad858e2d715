# backend/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from utils.errors import register_exception_handlers

# Import routers
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.orders import router as orders_router
from routes.admin_orders import router as admin_orders_router
from routes.stats import router as stats_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialisation
init_db()

app = FastAPI(title="Tienda de Vinilos API", version="1.0.0")

# CORS: the storefront front end plus local development
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Router registration
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(admin_orders_router)
app.include_router(stats_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Tienda de Vinilos API funcionando"}
