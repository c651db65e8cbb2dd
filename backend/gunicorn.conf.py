# Application entry point (factory call)
wsgi_app = "spoiler_auth:create_app()"

# Bind & workers
bind = "0.0.0.0:8000"
# The refresh token store lives in process memory: keep a single worker and
# scale with threads, otherwise each worker would see its own token families.
workers = 1
threads = 8
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Honor proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
