#!/usr/bin/env python3
"""
Run the invoice dashboard server.

Usage:
    python server/run.py

Environment variables:
    HOST - Server host (default: 0.0.0.0)
    PORT - Server port (default: 8000)
    DEBUG - Enable debug mode (default: false)
    DATABASE_URL - Database connection URL
    AUTH_SECRET - Secret for signing session cookies
    SEED_ON_STARTUP - Load placeholder data into an empty database
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn
from server.config import get_settings


def main() -> None:
    """Run the server."""
    settings = get_settings()

    print(f"""
╔══════════════════════════════════════════════════════════════╗
║                Acme Dashboard - Invoice Server               ║
╠══════════════════════════════════════════════════════════════╣
║  Host: {settings.host:<54}║
║  Port: {settings.port:<54}║
║  Debug: {str(settings.debug):<53}║
║  Database: {settings.database_url.split('@')[-1][:50]:<50}║
║  Seed on startup: {str(settings.seed_on_startup):<43}║
╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "server.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
