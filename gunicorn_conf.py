"""
Gunicorn configuration for the auth API.

Gunicorn manages the worker processes; each one runs a Uvicorn ASGI
worker with its own database pool. Metrics are kept in Redis so they
aggregate across workers.
"""

import multiprocessing
import os

from config.settings import settings

# Server socket
bind = f"{settings.api_host}:{settings.api_port}"
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 50

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = settings.log_level.lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

proc_name = "book-network-auth"

daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None

# TLS terminates at the reverse proxy
keyfile = None
certfile = None
