from dotenv import load_dotenv

import os

load_dotenv()

DEV = os.environ.get("DEV", "true").lower() == "true"
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

# Game
# "average_elimination" (0.8 x average, farthest player leaves) or "sum_closest" (0.7 x sum)
ROUND_RULE = os.environ.get("ROUND_RULE", "average_elimination")
MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", "0"))  # 0 = no ceiling
MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "1"))
ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))

# Client bundle, served only when the directory exists
STATIC_DIR = os.environ.get("STATIC_DIR", "static")

# Keep-alive
SELF_PING_URL = os.getenv("SELF_PING_URL") or os.getenv("RENDER_EXTERNAL_URL")
SELF_PING_INTERVAL_SEC = int(os.environ.get("SELF_PING_INTERVAL_SEC", "240"))

# Frames queued per connection before a client that stopped reading is dropped
OUTBOX_SIZE = int(os.environ.get("OUTBOX_SIZE", "256"))
