# election_ledger/config.py
# Central place for settings and constants
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# --- Storage Config ---
# memory | json | mongo
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
LEDGER_DB_PATH = os.getenv("LEDGER_DB_PATH", "data/ledger.json")

MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB = os.getenv("MONGO_DB", "voting_system")
ELECTION_DOC_ID = os.getenv("ELECTION_DOC_ID", "current")

# --- Election bootstrap ---
# When both are set the election is created at startup instead of via /election/create
ELECTION_NAME = os.getenv("ELECTION_NAME")
ELECTION_ADMIN = os.getenv("ELECTION_ADMIN")

# Forbid adding candidates while the voting window is open
LOCK_CANDIDATES_WHILE_OPEN = _env_flag("LOCK_CANDIDATES_WHILE_OPEN", False)

# --- HTTP ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
