import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
RECORD_TOOL_URL = os.getenv("RECORD_TOOL_URL", "http://localhost:8002")
RECORD_TOOL_TIMEOUT_S = float(os.getenv("RECORD_TOOL_TIMEOUT_S", "5.0"))
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
SELECTOR_REGISTRY_SIZE = int(os.getenv("SELECTOR_REGISTRY_SIZE", "1000"))
