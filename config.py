"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class SchemaApiConfig:
    """Schema API configuration."""

    base_url: str = ""  # Empty means no HTTP schema provider
    api_key: str = ""
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "SchemaApiConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("RECORDMAP_SCHEMA_URL", ""),
            api_key=os.getenv("RECORDMAP_SCHEMA_API_KEY", ""),
            timeout=int(os.getenv("RECORDMAP_SCHEMA_TIMEOUT", "30")),
        )


@dataclass
class SandboxConfig:
    """Expression sandbox configuration (custom transforms)."""

    base_url: str = ""
    api_key: str = ""
    timeout: int = 5

    @classmethod
    def from_env(cls) -> "SandboxConfig":
        """Load config from environment variables."""
        return cls(
            base_url=os.getenv("RECORDMAP_SANDBOX_URL", ""),
            api_key=os.getenv("RECORDMAP_SANDBOX_API_KEY", ""),
            timeout=int(os.getenv("RECORDMAP_SANDBOX_TIMEOUT", "5")),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    schema_file: str = ""
    output_dir: str = "./output"
    log_level: str = "WARNING"
    confidence_threshold: Optional[float] = None  # Overrides the AutoMapper default when set
    schema_api: SchemaApiConfig = None
    sandbox: SandboxConfig = None

    def __post_init__(self):
        """Initialize default values."""
        if self.schema_api is None:
            self.schema_api = SchemaApiConfig.from_env()
        if self.sandbox is None:
            self.sandbox = SandboxConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        threshold = os.getenv("RECORDMAP_CONFIDENCE_THRESHOLD")
        return cls(
            schema_file=os.getenv("RECORDMAP_SCHEMA_FILE", ""),
            output_dir=os.getenv("RECORDMAP_OUTPUT_DIR", "./output"),
            log_level=os.getenv("RECORDMAP_LOG_LEVEL", "WARNING").upper(),
            confidence_threshold=float(threshold) if threshold else None,
            schema_api=SchemaApiConfig.from_env(),
            sandbox=SandboxConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
