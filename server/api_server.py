"""FastAPI application entry point for the chatbot bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.container.ContainerClientInterface import ContainerClientInterface
from shared.clients.container.ContainerClientManager import ContainerClientManager
from shared.clients.email.EmailClientManager import EmailClientManager
from shared.clients.liveness.LivenessClient import LivenessClient
from shared.stores.apikey.APIKeyStoreManager import APIKeyStoreManager
from shared.stores.docstore.DocStoreRegistry import DocStoreRegistry
from services.liveness.PingService import PingService
from server.core.InvokeService import InvokeService
from server.core.OTPService import OTPService
from server.dependencies.errors import register_error_handlers
from server.routers.HealthRouter import router as health_router
from server.routers.OTPRouter import router as otp_router
from server.routers.PublicRouter import router as public_router

PING_INTERVAL_SECONDS = 5 * 60

logging = setup_logging()
config = HelperConfig(logger=logging)
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = config

    container_client = ContainerClientManager(helper_config=config).get_client()
    apikey_store = APIKeyStoreManager(helper_config=config).get_store()
    clients: list[ClientInterface] = [container_client]

    # OTP delivery is optional; without an email engine the OTP routes answer 501
    email_client = None
    if config.get_string_val("EMAIL_ENGINE", default=""):
        email_client = EmailClientManager(helper_config=config).get_client()
        clients.append(email_client)

    ping_service = None
    if config.get_bool_val("PING_ENABLED", default=False):
        liveness_client = LivenessClient(helper_config=config)
        clients.append(liveness_client)
        ping_service = PingService(
            helper_config=config,
            liveness_client=liveness_client,
            interval_seconds=config.get_number_val("PING_INTERVAL_SECONDS", default=PING_INTERVAL_SECONDS),
        )

    logging.info("Booting all clients...")
    for client in clients:
        await client.boot()
    await apikey_store.boot()
    logging.info("All clients booted successfully.")

    app.state.apikey_store = apikey_store
    app.state.doc_stores = DocStoreRegistry(helper_config=config)
    app.state.invoke_service = InvokeService(
        helper_config=config,
        container_client=container_client,
        apikey_store=apikey_store,
    )
    app.state.otp_service = (
        OTPService(helper_config=config, email_client=email_client) if email_client else None
    )

    await check_connections(container_client)
    if ping_service:
        await ping_service.start()

    # while the app is running...
    yield

    # when the app shuts down, stop the poller and close all client connections
    logging.info("Shutting down — closing all clients...")
    if ping_service:
        await ping_service.stop()
    for client in clients:
        await client.close()
    await apikey_store.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="chatbot_bridge",
    description=(
        "Backend for an AI-chatbot creation platform. Routes API-key authenticated "
        "chat messages to per-tenant containers via POST /public/invoke, stores "
        "retrieval documents per container and delivers OTP emails."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_list_val("CORS_ORIGINS", default=["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)
app.include_router(health_router)
app.include_router(otp_router)
app.include_router(public_router)


async def check_connections(container_client: ContainerClientInterface) -> None:
    """Check connectivity to the container host on startup.

    Failures are non-fatal: the server stays up and invocations report the
    container error to the caller.
    """
    try:
        result: httpx.Response = await container_client.do_healthcheck()
    except httpx.HTTPError as e:
        logging.warning("Container host is not reachable (%s). Invocations may fail.", e)
        return
    if not result.is_success:
        logging.warning(
            "Container host answered the healthcheck with status %d. Invocations may fail.",
            result.status_code,
        )


if __name__ == "__main__":
    import uvicorn

    port = int(config.get_number_val("PORT", default=8000))
    logging.info(
        "Starting chatbot_bridge API Server v%s from root dir: %s on port %d...",
        app_version,
        os.environ.get("ROOT_DIR", os.getcwd()),
        port,
    )
    uvicorn.run(app, host="0.0.0.0", port=port)
