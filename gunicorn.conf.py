"""
Gunicorn configuration for production deployment.

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app

- Sync workers: each submission runs its own event loop inside the request
- The timeout sits above AUTH_REQUEST_TIMEOUT so a slow authentication
  service surfaces as a 502 JSON answer, not a killed worker
- Access log format excludes request bodies (they carry passwords)
"""

import multiprocessing
import os

# --- Bind ---
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8080')

# --- Workers ---
# 2 * CPU cores + 1, capped at 4: validation traffic is light.
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)
worker_class = 'sync'

# --- Timeouts ---
timeout = 30
graceful_timeout = 10
keepalive = 2

# --- Worker Recycling ---
max_requests = 1000
max_requests_jitter = 50

# --- Request Limits ---
# Matches Flask's MAX_CONTENT_LENGTH (16KB) at the WSGI layer.
limit_request_line = 8190
limit_request_fields = 50
limit_request_field_size = 8190

# --- Logging ---
accesslog = '-'
errorlog = '-'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" %(L)s'
loglevel = os.environ.get('LOG_LEVEL', 'info')

proc_name = 'authforms'

# Trust X-Forwarded-* only from the reverse proxy.
forwarded_allow_ips = os.environ.get('FORWARDED_ALLOW_IPS', '127.0.0.1')
