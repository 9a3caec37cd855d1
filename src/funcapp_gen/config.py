"""Analyzer configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

from funcapp_gen.constants import DEFAULT_EXTENSION_BUNDLE_VERSION, DEFAULT_HANDLER_EXECUTABLE

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(slots=True)
class AnalyzerConfig:
    strict_paths: bool = False
    default_auth_level: str = "anonymous"
    handler_executable: str = DEFAULT_HANDLER_EXECUTABLE
    extension_bundle_version: str = DEFAULT_EXTENSION_BUNDLE_VERSION

    @classmethod
    def from_env(cls) -> AnalyzerConfig:
        return cls(
            strict_paths=_env_flag("FUNCAPP_STRICT_PATHS"),
            default_auth_level=os.getenv("FUNCAPP_AUTH_LEVEL", "anonymous"),
            handler_executable=os.getenv("FUNCAPP_HANDLER", DEFAULT_HANDLER_EXECUTABLE),
            extension_bundle_version=os.getenv("FUNCAPP_EXTENSION_BUNDLE_VERSION", DEFAULT_EXTENSION_BUNDLE_VERSION),
        )
