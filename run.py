#!/usr/bin/env python3
"""
Production startup script for the Donor Registry API
"""
import uvicorn
import os
import socket
import sys
from donor_registry.core.config import settings
from donor_registry.core.logging import logger

def find_available_port(host: str, start_port: int, max_attempts: int) -> int:
    """Return the first port from start_port that can be bound, trying max_attempts more."""
    for port in range(start_port, start_port + max_attempts + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((host, port))
            except OSError:
                logger.warning(f"Port {port} is in use, trying {port + 1}")
                continue
            return port
    raise RuntimeError(f"No free port in {start_port}-{start_port + max_attempts}")

def main():
    """Start the FastAPI application."""

    os.makedirs("logs", exist_ok=True)

    logger.info(f"Starting {settings.APP_NAME} Server")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug Mode: {settings.DEBUG}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[-1]}")
    logger.info(f"Donation cooldown = {settings.DONATION_COOLDOWN_DAYS} days")

    try:
        port = find_available_port(settings.HOST, settings.PORT, settings.PORT_FALLBACK_ATTEMPTS)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    config = {
        "app": "donor_registry.main:app",
        "host": settings.HOST,
        "port": port,
        "reload": settings.DEBUG,
        "log_level": settings.LOG_LEVEL.lower(),
        "access_log": True,
        "use_colors": settings.DEBUG,
    }

    if not settings.DEBUG:
        # Production settings
        config.update({
            "workers": settings.WORKERS,
            "lifespan": "on",
        })

    logger.info(f"Server running at http://localhost:{config['port']}")

    try:
        uvicorn.run(**config)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
