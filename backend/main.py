# backend/main.py
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from database import init_db
from utils.errors import RetailError, STATUS_BY_KIND, public_detail

load_dotenv()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Routers
from routes.auth import router as auth_router
from routes.customers import router as customers_router
from routes.products import router as products_router
from routes.cart import router as cart_router
from routes.orders import router as orders_router

# Initialisation
init_db()

app = FastAPI(title="ABC Retail API", version="1.0.0")

# Blob containers are served read-only
Path(settings.BLOB_STORAGE_ROOT).mkdir(parents=True, exist_ok=True)
app.mount("/blobs", StaticFiles(directory=settings.BLOB_STORAGE_ROOT), name="blobs")

# CORS configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Failures were logged where they happened; only translate them here
@app.exception_handler(RetailError)
async def retail_error_handler(request: Request, exc: RetailError):
    return JSONResponse(status_code=STATUS_BY_KIND[exc.kind], content={"detail": public_detail(exc)})


# Router registration
app.include_router(auth_router)
app.include_router(customers_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)

@app.get("/")
def read_root():
    return {"message": "ABC Retail API is running"}
