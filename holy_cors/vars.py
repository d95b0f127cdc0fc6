import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "holy-cors")

HOLY_CORS_PORT = int(os.environ.get("HOLY_CORS_PORT", "8080"))
HOLY_CORS_BIND = os.environ.get("HOLY_CORS_BIND", "0.0.0.0")
HOLY_CORS_ORIGINS = [
    o.strip() for o in os.environ.get("HOLY_CORS_ORIGINS", "").split(",") if o.strip()
]
# Development mode, accepts any Origin
HOLY_CORS_ALLOW_ALL = os.environ.get("HOLY_CORS_ALLOW_ALL", "false").lower() == "true"
HOLY_CORS_VERBOSE = os.environ.get("HOLY_CORS_VERBOSE", "false").lower() == "true"

# Per outbound request, in seconds
PROXY_TIMEOUT = float(os.environ.get("HOLY_CORS_TIMEOUT", "60"))

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")
