# clinic_api/config.py
import logging
import os

from dotenv import load_dotenv

load_dotenv()

# --- Application ---
APP_TITLE = os.getenv("CLINIC_APP_TITLE", "Bone & Joint Clinic API")
APP_VERSION = "1.0.0"

# --- Server ---
HOST = os.getenv("CLINIC_HOST", "127.0.0.1")
PORT = int(os.getenv("CLINIC_PORT", "8000"))

# --- Logging ---
LOG_LEVEL = os.getenv("CLINIC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# --- Demo data ---
SEED_DEMO = os.getenv("CLINIC_SEED_DEMO", "false").lower() in ("1", "true", "yes")
SEED_PATIENTS = int(os.getenv("CLINIC_SEED_PATIENTS", "10"))


def configure_logging(level: str = LOG_LEVEL):
    """Console logging for the API process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
