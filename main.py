# main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import LOG_LEVEL
from app.core.db import init_models
from app.core.exceptions import register_exception_handlers
from app.middleware.request_logger import RequestLoggerMiddleware
from app.routers import catalog_router, orders_router, promotions_router, vouchers_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

app = FastAPI(
    title="Discount Engine API",
    description="FastAPI backend applying vouchers and promotions to orders",
    version="0.1.0",
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)
register_exception_handlers(app)


# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}


# Register routers
app.include_router(catalog_router)
app.include_router(vouchers_router)
app.include_router(promotions_router)
app.include_router(orders_router)


@app.on_event("startup")
async def on_startup():
    await init_models()

