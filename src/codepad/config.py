"""Configuration loader.

The editor service reads its configuration from environment variables so
that the same process can run locally, in docker-compose or on Cloud Run.
Reasonable defaults are provided so that local development works out of the
box.

Environment variables:

``CODEPAD_API_KEY``
    Shared secret expected in the ``x-api-key`` header.  Empty disables the
    check, which is convenient for local development.

``CODEPAD_STORAGE_BACKEND``
    Where documents and preferences are persisted.  Supported values are
    ``local``, ``gcs`` and ``memory``.  Defaults to ``local``.

``CODEPAD_STORAGE_PATH``
    Base directory for the ``local`` backend.  Defaults to ``/tmp/codepad``.

``CODEPAD_GCS_BUCKET``
    Bucket used by the ``gcs`` backend.  Required if using that backend.

``CODEPAD_SAVE_DEBOUNCE_MS``
    Quiet interval after the last edit before a document is saved.
    Default is 1000.

``CODEPAD_RUN_TIMEOUT_SECONDS``
    Upper bound on a single run.  ``0`` waits forever.  Default is 30.

``CODEPAD_EXEC_MIN_DELAY_MS`` / ``CODEPAD_EXEC_MAX_DELAY_MS``
    Bounds of the simulated execution delay.  Defaults are 1000 and 2000.

``CODEPAD_FLUSH_ON_SWITCH``
    If ``true``, a pending save is written immediately when the language is
    switched; otherwise it keeps its own timer.  Defaults to ``true``.

``CODEPAD_DEFAULT_LANGUAGE``
    Language selected when a session starts.  Defaults to ``javascript``.

``PORT``
    The port on which the API server listens.  Defaults to 8080.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .languages import Language


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y"}


def _int_var(name: str, default: int, minimum: int = 0) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        parsed = int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


@dataclass
class Config:
    """Centralised configuration object."""

    api_key: str
    storage_backend: str
    storage_path: str
    gcs_bucket: str | None
    save_debounce_ms: int
    run_timeout_seconds: int
    exec_min_delay_ms: int
    exec_max_delay_ms: int
    flush_on_switch: bool
    default_language: Language
    port: int

    @classmethod
    def load(cls) -> "Config":
        api_key = os.getenv("CODEPAD_API_KEY", "")

        storage_backend = os.getenv("CODEPAD_STORAGE_BACKEND", "local").lower()
        if storage_backend not in {"local", "gcs", "memory"}:
            raise ValueError(
                f"Invalid CODEPAD_STORAGE_BACKEND: {storage_backend}. Use 'local', 'gcs' or 'memory'."
            )
        storage_path = os.getenv("CODEPAD_STORAGE_PATH", "/tmp/codepad")
        gcs_bucket = os.getenv("CODEPAD_GCS_BUCKET")
        if storage_backend == "gcs" and not gcs_bucket:
            raise RuntimeError(
                "CODEPAD_GCS_BUCKET must be set when using the GCS storage backend"
            )

        exec_min_delay_ms = _int_var("CODEPAD_EXEC_MIN_DELAY_MS", 1000)
        exec_max_delay_ms = _int_var("CODEPAD_EXEC_MAX_DELAY_MS", 2000)
        if exec_max_delay_ms < exec_min_delay_ms:
            raise ValueError(
                "CODEPAD_EXEC_MAX_DELAY_MS must not be lower than CODEPAD_EXEC_MIN_DELAY_MS"
            )

        language_env = os.getenv("CODEPAD_DEFAULT_LANGUAGE", Language.JAVASCRIPT.value)
        default_language = Language.parse(language_env)
        if default_language is None:
            raise ValueError(f"Invalid CODEPAD_DEFAULT_LANGUAGE: {language_env}")

        return cls(
            api_key=api_key,
            storage_backend=storage_backend,
            storage_path=storage_path,
            gcs_bucket=gcs_bucket,
            save_debounce_ms=_int_var("CODEPAD_SAVE_DEBOUNCE_MS", 1000),
            run_timeout_seconds=_int_var("CODEPAD_RUN_TIMEOUT_SECONDS", 30),
            exec_min_delay_ms=exec_min_delay_ms,
            exec_max_delay_ms=exec_max_delay_ms,
            flush_on_switch=_parse_bool(os.getenv("CODEPAD_FLUSH_ON_SWITCH"), True),
            default_language=default_language,
            port=_int_var("PORT", 8080, minimum=1),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
