"""Main FastAPI application."""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from quickbite.core.config import settings
from quickbite.core.logging import setup_logging
from quickbite.db.database import init_db
from quickbite.api import auth, cart, chat, health, menu, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    yield


app = FastAPI(
    title="QuickBite",
    description=f"Ordering assistant and online menu for {settings.restaurant_name}",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, tags=["auth"])
app.include_router(menu.router, tags=["menu"])
app.include_router(cart.router, tags=["cart"])
app.include_router(orders.router, tags=["orders"])
app.include_router(chat.router, tags=["chat"])


@app.get("/")
async def root():
    return {
        "message": f"{settings.restaurant_name} API",
        "version": "0.1.0",
    }


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("quickbite.main:app", host=settings.host, port=settings.port)
