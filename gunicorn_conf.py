import multiprocessing
import os

# Gunicorn configuration file
# For FastAPI/Uvicorn, we use the UvicornWorker

# Bind to all interfaces on PORT (default 5000)
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '5000')}"

# Worker configuration
# Standard formula: (2 x num_cores) + 1
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "taskboard.main:app"

# Timeout and Keepalive
timeout = 120
keepalive = 5
# Each worker owns its engine; SIGTERM runs the app shutdown, which disposes it
graceful_timeout = 30

# Logging
accesslog = "-" # Log to stdout
errorlog = "-"  # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Process management
proc_name = "task_api"
reload = False  # Set to True for development only
