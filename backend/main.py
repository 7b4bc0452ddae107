import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from db.database import create_db_and_tables
from routers.inventory import router as inventory_router
from routers.checkout import router as checkout_router
from routers.settings import router as settings_router
from routers.auth import router as auth_router
from contextlib import asynccontextmanager

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    yield


app = FastAPI(
    title="Storefront Stock API",
    description="Stock availability checks for the storefront cart and checkout",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def malformed_request(request: Request, exc: RequestValidationError):
    # Storefront clients expect 400 for a body they got wrong, not 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# Stock availability (add-to-cart, inventory endpoint)
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
# Checkout page re-validation
app.include_router(checkout_router, prefix="/checkout", tags=["checkout"])
# Store settings read by the storefront UI
app.include_router(settings_router, prefix="/settings", tags=["settings"])
# Customer registration (pending approval or magic-link auto-approval)
app.include_router(auth_router, prefix="/auth", tags=["auth"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
