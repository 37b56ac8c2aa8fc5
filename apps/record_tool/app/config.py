import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DB_PATH = os.getenv("RECORD_DB_PATH", "records.db")
