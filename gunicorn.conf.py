"""
Gunicorn Configuration

Runs the BinFlow API with Uvicorn workers.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 512

# Worker processes. Each worker holds its own connection pool
workers = int(os.getenv("WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 8)))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 5000
max_requests_jitter = 500
timeout = 60
keepalive = 5
graceful_timeout = 30

proc_name = "binflow-api"
daemon = False

# Logging goes to stdout; the app itself emits structlog JSON
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = None


def when_ready(server):
    server.log.info("BinFlow API ready on %s with %s workers", bind, workers)


def worker_abort(worker):
    worker.log.warning("Worker %s aborted, likely a request exceeded %ss", worker.pid, timeout)
