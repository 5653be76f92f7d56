"""
Central configuration for backend settings.
"""
import os


# Graticule defaults used when a request does not override them
GRATICULE_PROJECTION: str = os.getenv("GRATICULE_PROJECTION", "EPSG:4326")
GRATICULE_TARGET_SIZE: float = float(os.getenv("GRATICULE_TARGET_SIZE", "100"))
GRATICULE_MAX_LINES: int = int(os.getenv("GRATICULE_MAX_LINES", "100"))
GRATICULE_GROUND_MODEL: str = os.getenv("GRATICULE_GROUND_MODEL", "sphere")

# Largest view (in pixels) a single /lines request may ask for
GRATICULE_MAX_REQUEST_PIXELS: int = int(os.getenv("GRATICULE_MAX_REQUEST_PIXELS", str(8192 * 8192)))

# Engines kept alive between requests, keyed by their options
GRATICULE_ENGINE_CACHE_SIZE: int = int(os.getenv("GRATICULE_ENGINE_CACHE_SIZE", "16"))

# Logging
LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
RING_BUFFER_SIZE: int = int(os.getenv("RING_BUFFER_SIZE", "2000"))
RING_BUFFER_MIN_LEVEL: str = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()

# HTTP server
API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
