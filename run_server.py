#!/usr/bin/env python
"""
BinFlow Server Entry Point

Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    Seed demo:    python run_server.py --seed-demo --dev

    Or with Gunicorn:
    gunicorn binflow.main:app -c gunicorn.conf.py
"""

import argparse
import asyncio
import os
import subprocess
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from binflow.config import get_settings  # noqa: E402

APP_PATH = "binflow.main:app"


def run_dev_server(host: str, port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        reload=True,
        reload_dirs=["binflow"],
        log_level="debug",
        access_log=True,
    )


def run_prod_server(host: str, port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        workers=int(os.getenv("WORKERS", 4)),
        log_level=settings.monitoring.log_level.lower(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn(port: int):
    """Run with Gunicorn."""
    env = dict(os.environ, BIND=f"0.0.0.0:{port}")
    subprocess.run(["gunicorn", APP_PATH, "-c", "gunicorn.conf.py"], env=env, check=False)


def seed_demo_data(days: int):
    from binflow.ingestion.seed_db import main as seed_main

    asyncio.run(seed_main(["--days", str(days)]))


if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="BinFlow API Server")
    parser.add_argument("--dev", action="store_true", help="Run in development mode with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run with Gunicorn (production)")
    parser.add_argument("--host", default=settings.api_host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Port to run on")
    parser.add_argument("--seed-demo", action="store_true", help="Seed demo data before starting")
    parser.add_argument("--seed-days", type=int, default=7, help="Days of demo data to seed")

    args = parser.parse_args()

    if args.seed_demo:
        print(f"Seeding {args.seed_days} days of demo data...")
        seed_demo_data(args.seed_days)

    if args.dev:
        print(f"Starting BinFlow development server on {args.host}:{args.port} ({settings.business.timezone})")
        run_dev_server(args.host, args.port)
    elif args.gunicorn:
        print("Starting BinFlow with Gunicorn...")
        run_gunicorn(args.port)
    else:
        print(f"Starting BinFlow on {args.host}:{args.port}")
        run_prod_server(args.host, args.port)
