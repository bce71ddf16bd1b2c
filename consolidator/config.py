"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the footage consolidator.
"""
import hashlib
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Signature Configuration
    content_hash_enabled: bool = Field(True, description="Add a content hash to file-backed signatures")
    content_hash_bytes: int = Field(1048576, ge=0, le=1073741824, description="Bytes hashed per file (0=whole file)")
    content_hash_algorithm: str = Field("sha1", description="hashlib algorithm used for content hashes")

    # Pass Configuration
    remove_duplicates: bool = Field(True, description="Remove duplicates left without references")
    dry_run: bool = Field(False, description="Compute and report without mutating the project")

    # Audit Configuration
    audit_enabled: bool = Field(True, description="Append redirects and removals to the audit log")
    audit_file: str = Field(".consolidator_cache/audit_logs.jsonl", description="JSONL audit log path")

    # Project Configuration
    project_file: str = Field("", description="Default project snapshot path for the CLI")

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")
    max_json_output_length: int = Field(1000, ge=100, le=10000, description="Max JSON output length")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator('content_hash_algorithm')
    @classmethod
    def validate_algorithm(cls, v):
        name = v.lower()
        if name not in hashlib.algorithms_guaranteed:
            raise ValueError(f'Unsupported hash algorithm: {v}')
        return name

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        if self.audit_enabled and not self.audit_file.strip():
            issues.append("AUDIT_FILE is required when AUDIT_ENABLED=true")

        if self.audit_enabled and self.audit_file.rstrip().endswith(("/", "\\")):
            issues.append("AUDIT_FILE must name a file, not a directory")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from consolidator.utils.logger import log_info

        log_info("Configuration loaded",
                 content_hash_enabled=self.content_hash_enabled,
                 content_hash_bytes=self.content_hash_bytes,
                 content_hash_algorithm=self.content_hash_algorithm,
                 remove_duplicates=self.remove_duplicates,
                 dry_run=self.dry_run,
                 audit_enabled=self.audit_enabled,
                 audit_file=self.audit_file,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
