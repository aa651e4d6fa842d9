"""HTTP audit logging middleware for the front desk service."""
from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter
from typing import Optional

from fastapi import FastAPI, Request

from .config import get_settings

AUDIT_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def build_audit_logger(service_name: str, log_dir: Optional[str] = None) -> logging.Logger:
    """Return the ``audit.<service_name>`` logger, attaching its file handler once."""
    logger = logging.getLogger(f"audit.{service_name}")
    if logger.handlers:
        return logger

    directory = Path(log_dir or get_settings().log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    logger.setLevel(logging.INFO)
    handler = logging.FileHandler(directory / f"{service_name}.log", encoding="utf-8")
    handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger


def add_audit_middleware(app: FastAPI, service_name: str) -> None:
    logger = build_audit_logger(service_name)

    @app.middleware("http")
    async def audit_logger(request: Request, call_next):  # type: ignore[no-untyped-def]
        start = perf_counter()
        response = await call_next(request)
        duration_ms = (perf_counter() - start) * 1000
        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            "%s %s | status=%s | client=%s | duration=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            client_ip,
            duration_ms,
        )
        return response
