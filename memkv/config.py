from dotenv import load_dotenv
import os

load_dotenv()

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

class Settings:
    """
    Server settings, read from the environment (and a `.env` file if present)
    at construction time.
    """
    def __init__(self):
        self.host = os.getenv("MEMKV_HOST", "0.0.0.0")
        self.port = int(os.getenv("MEMKV_PORT", "8080"))

        # expiry: one global age limit, checked once per sweep interval
        self.max_age = float(os.getenv("MEMKV_MAX_AGE", str(24 * 60 * 60)))
        self.sweep_interval = float(os.getenv("MEMKV_SWEEP_INTERVAL", str(24 * 60 * 60)))

        self.preserve_created_at = _env_bool("MEMKV_PRESERVE_CREATED_AT", False)
        self.canonicalize_json = _env_bool("MEMKV_CANONICALIZE_JSON", True)

        self.log_level = os.getenv("MEMKV_LOG_LEVEL", "INFO").upper()

    def __repr__(self):
        return (f"Settings(host={self.host!r}, port={self.port}, max_age={self.max_age}, "
                f"sweep_interval={self.sweep_interval}, preserve_created_at={self.preserve_created_at}, "
                f"canonicalize_json={self.canonicalize_json}, log_level={self.log_level!r})")
