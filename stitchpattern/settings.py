import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_BRAND = os.getenv("DEFAULT_BRAND", "DMC")
DEFAULT_TITLE = os.getenv("DEFAULT_TITLE", "Untitled Pattern")
DEFAULT_CLOTH_COUNT = int(os.getenv("DEFAULT_CLOTH_COUNT", "14"))
DEFAULT_MAX_COLORS = int(os.getenv("DEFAULT_MAX_COLORS", "20"))

# Limits enforced by the HTTP layer only; the core accepts any positive size.
MIN_GRID_SIDE = int(os.getenv("MIN_GRID_SIDE", "10"))
MAX_GRID_SIDE = int(os.getenv("MAX_GRID_SIDE", "500"))
MAX_COLORS_LIMIT = int(os.getenv("MAX_COLORS_LIMIT", "50"))
