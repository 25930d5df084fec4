# evote/config.py
# Central place for settings and constants
import os
from dotenv import load_dotenv

load_dotenv()

# --- Database Config ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "evoting")
# Fail fast instead of hanging when the server is unreachable
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "3000"))

USERS_COLLECTION_NAME = "users"
ELECTION_COLLECTION_NAME = "election"
ELECTION_DOC_ID = "current"

# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Demo credentials: admin/admin. Set ADMIN_PASSWORD_HASH (see hash_admin_password.py)
# to avoid keeping a plain password in the environment.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

# --- HTTP Config ---
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

# --- Seed data, written once on first initialization ---
SEED_CANDIDATES = [
    {"name": "Alice", "manifesto": "Transparency and Innovation"},
    {"name": "Bob", "manifesto": "Community and Growth"},
]
SEED_USERS = [
    {"username": "voter1", "display_name": "Voter One", "role": "VOTER", "verified": False},
    {"username": "admin", "display_name": "Administrator", "role": "ADMIN", "verified": True},
]
