import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.log_config import configure_logging

from user.router import user_router
from outofoffice.router import ooo_router
import models_bootstrap

configure_logging()

openapi_tags = [
    {
        "name": "Users",
        "description": "User operations",
    },
    {
        "name": "Out of Office",
        "description": "Booking redirects while a user is away",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(user_router, prefix="/api")
app.include_router(ooo_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}


def run():
    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
