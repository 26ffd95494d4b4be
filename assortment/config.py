# assortment/config.py

from typing import Literal, Optional
import logging
import sys

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from pythonjsonlogger.json import JsonFormatter

load_dotenv()

# Fields the solver layers attach via `extra=`; any of them may be absent
LOG_FIELDS = (
    "path", "reason", "target_minor", "catalog_size", "split_count",
    "upper_bound", "best_sum", "unit_count", "elapsed_ms", "timeout_s", "backend",
)


class CustomJsonFormatter(JsonFormatter):
    """JSON log lines without the solve fields a given event did not set."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        for key in [k for k, v in log_record.items() if v is None]:
            del log_record[key]


def setup_json_logging(log_level: int = logging.INFO) -> None:
    """Send the `assortment` logger tree to stdout as JSON, replacing earlier handlers."""
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s " + " ".join(f"%({f})s" for f in LOG_FIELDS)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter(fmt))

    engine_logger = logging.getLogger("assortment")
    engine_logger.setLevel(log_level)
    engine_logger.handlers = [handler]
    engine_logger.propagate = False


RemoteBackend = Literal["none", "http", "llm"]


class Settings(BaseSettings):
    # App
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    ASSORTMENT_API_SECRET: str = ""

    # Hybrid dispatch (no hardcoded magic numbers)
    # Compared against the quantized target, i.e. in minor currency units.
    SOLVER_LOCAL_TARGET_THRESHOLD: int = 2_000_000
    SOLVER_HYBRID_ITEM_THRESHOLD: int = 200
    SOLVER_REMOTE_TIMEOUT: float = 30.0  # seconds
    # Widest sum range the local DP may allocate (about 9 bytes per sum); None disables the cap
    SOLVER_LOCAL_MAX_SEARCH_WIDTH: Optional[int] = 20_000_000

    # Remote approximate solver
    SOLVER_REMOTE_BACKEND: RemoteBackend = "none"
    SOLVER_REMOTE_URL: Optional[str] = None

    # OpenAI (backend: llm)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.0
    OPENAI_MAX_TOKENS: int = 4096

    # Invoice fill
    INVOICE_VAT_RATE: float = 0.20

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_solver_bounds(self) -> "Settings":
        """Reject tunables that would make the dispatch policy meaningless."""
        if self.SOLVER_REMOTE_TIMEOUT <= 0:
            raise ValueError("SOLVER_REMOTE_TIMEOUT must be > 0 seconds.")
        if self.SOLVER_LOCAL_TARGET_THRESHOLD < 0:
            raise ValueError("SOLVER_LOCAL_TARGET_THRESHOLD must be >= 0.")
        if self.SOLVER_HYBRID_ITEM_THRESHOLD < 0:
            raise ValueError("SOLVER_HYBRID_ITEM_THRESHOLD must be >= 0.")
        if self.SOLVER_LOCAL_MAX_SEARCH_WIDTH is not None and self.SOLVER_LOCAL_MAX_SEARCH_WIDTH <= 0:
            raise ValueError("SOLVER_LOCAL_MAX_SEARCH_WIDTH must be > 0 (or unset).")
        if self.INVOICE_VAT_RATE < 0:
            raise ValueError("INVOICE_VAT_RATE must be >= 0.")
        if self.SOLVER_REMOTE_BACKEND == "http" and not self.SOLVER_REMOTE_URL:
            raise ValueError("SOLVER_REMOTE_URL is required when SOLVER_REMOTE_BACKEND=http.")
        return self


settings = Settings()
