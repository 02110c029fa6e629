from __future__ import annotations
from dotenv import load_dotenv
load_dotenv()  # Load .env file before importing app modules

import time
import logging
import json
from contextlib import asynccontextmanager
from typing import Callable, Optional
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from foodtech.routes import router
from foodtech.service import FoodTechExtension

# Configure logging to show all INFO level logs from our modules
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s: %(name)s: %(message)s'
)
logging.getLogger("foodtech").setLevel(logging.INFO)

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log block calls coming from the host."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"

        # CORS preflight: pass through with debug logging only
        if request.method == "OPTIONS":
            logger.debug(f"OPTIONS request: {request.url.path} from {client_ip}")
            return await call_next(request)

        body = None
        if request.method == "POST":
            try:
                body_bytes = await request.body()
                if body_bytes:
                    body = json.loads(body_bytes)
                    # never log credentials
                    if isinstance(body, dict) and "password" in body:
                        body = {**body, "password": "***"}
            except json.JSONDecodeError:
                body = "<non-json body>"

        query_params = dict(request.query_params) if request.query_params else None
        logger.info(
            f"Request: {request.method} {request.url.path} | "
            f"IP: {client_ip} | "
            f"Query: {query_params} | "
            f"Body: {body if body else 'N/A'}"
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Time: {process_time:.3f}s"
        )

        return response


def create_app(extension: Optional[FoodTechExtension] = None) -> FastAPI:
    ext = extension if extension is not None else FoodTechExtension.from_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ext.start()
        try:
            yield
        finally:
            ext.stop()

    app = FastAPI(title="FoodTech Extension Service", version="0.1.0", lifespan=lifespan)
    app.state.extension = ext

    # Request logging middleware (add first so it wraps everything)
    app.add_middleware(LoggingMiddleware)

    # The block editor is served from another origin on the local network
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


if __name__ == "__main__":
    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=8000)
