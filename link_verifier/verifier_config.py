"""
Configuration for the markdown link verifier.
Values come from the environment (prefix VERIFY_LINKS_) or a local .env file.
"""
import logging
from typing import List, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from . import __version__

load_dotenv()


class VerifierConfig(BaseSettings):
    """Link verifier configuration"""

    model_config = SettingsConfigDict(
        env_prefix="VERIFY_LINKS_", extra="ignore")

    # Document discovery
    # Root scanned when no paths are given on the command line
    default_root: str = Field(".")
    # Comma-separated list of document extensions
    document_extensions: str = Field(".md")
    # Comma-separated list of directory names that are never scanned
    exclude_dirs: str = Field("vendor,glide")

    # URL probing
    request_timeout: float = Field(10.0)  # seconds per URL
    retry_attempts: int = Field(1)
    retry_delay: float = Field(1.0)
    max_concurrent_probes: int = Field(8)
    # Probe every external URL concurrently before the sequential pass
    prefetch_urls: bool = Field(True)
    user_agent: str = Field(f"verify-links/{__version__}")

    # Logging
    log_level: str = Field("WARNING")
    enable_debug_logging: bool = Field(False)

    @property
    def document_extensions_list(self) -> Tuple[str, ...]:
        """Return normalized extensions, each with a leading dot"""
        exts = []
        for ext in (self.document_extensions or '').split(','):
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith('.'):
                ext = '.' + ext
            exts.append(ext)
        return tuple(exts)

    @property
    def exclude_dirs_list(self) -> List[str]:
        """Return list of directory names to skip during discovery"""
        return [d.strip() for d in (self.exclude_dirs or '').split(',') if d.strip()]

    @property
    def effective_log_level(self) -> int:
        """Log level for the CLI, DEBUG when debug logging is forced"""
        if self.enable_debug_logging:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.WARNING

    def validate_configuration(self) -> List[str]:
        """Validate configuration and return warnings"""
        warnings = []

        if self.request_timeout <= 0:
            warnings.append(
                f"VERIFY_LINKS_REQUEST_TIMEOUT must be positive (got {self.request_timeout})")

        if self.retry_attempts < 0:
            warnings.append(
                f"VERIFY_LINKS_RETRY_ATTEMPTS must not be negative (got {self.retry_attempts})")

        if self.retry_delay < 0:
            warnings.append(
                f"VERIFY_LINKS_RETRY_DELAY must not be negative (got {self.retry_delay})")

        if self.max_concurrent_probes < 1:
            warnings.append(
                "VERIFY_LINKS_MAX_CONCURRENT_PROBES must be at least 1; probes will run one at a time")

        if not self.document_extensions_list:
            warnings.append(
                "VERIFY_LINKS_DOCUMENT_EXTENSIONS is empty - no documents will be checked")

        if self.max_concurrent_probes > 64:
            warnings.append(
                "High probe concurrency may trigger rate limiting on remote hosts")

        return warnings


# Global configuration instance
config = VerifierConfig()

# Validate configuration on import
if config.enable_debug_logging:
    warnings = config.validate_configuration()
    if warnings:
        logger = logging.getLogger(__name__)
        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")
