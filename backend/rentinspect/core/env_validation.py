"""
Runtime Environment Validation Module

This module validates the environment at application startup.
If validation fails, the application will refuse to start (hard fail).

This prevents runtime errors from missing or misconfigured environment variables,
most importantly object storage that cannot accept reports or photos.
"""

import os
import sys

from pydantic import ValidationError

from rentinspect.core.config import Settings, StorageProvider


def validate_environment() -> Settings:
    """
    Validate all required environment variables at startup.

    Returns:
        Settings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """

    try:
        settings = Settings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    # 1. CORS: Ensure wildcard is not used in production
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            print(
                "❌ FATAL: Wildcard CORS origin (*) detected in production mode.",
                file=sys.stderr,
            )
            sys.exit(1)

    # 2. Object storage: provider-specific configuration
    provider = settings.storage_provider
    if provider == StorageProvider.GCS:
        if not settings.gcs_bucket_name:
            print(
                "❌ FATAL: GCS_BUCKET_NAME required when STORAGE_PROVIDER=gcs",
                file=sys.stderr,
            )
            sys.exit(1)
    elif provider == StorageProvider.S3:
        if not settings.s3_bucket_name:
            print(
                "❌ FATAL: S3_BUCKET_NAME required when STORAGE_PROVIDER=s3",
                file=sys.stderr,
            )
            sys.exit(1)
    else:
        for directory in (settings.report_dir, settings.upload_dir):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                print(f"❌ FATAL: Storage directory is not writable: {e}", file=sys.stderr)
                sys.exit(1)
            if not os.access(directory, os.W_OK):
                print(
                    f"❌ FATAL: Storage directory is not writable: {directory}",
                    file=sys.stderr,
                )
                sys.exit(1)

    # 3. Firebase: Validate credentials path exists (if provided)
    if settings.google_application_credentials:
        if not os.path.exists(settings.google_application_credentials):
            print(
                f"❌ FATAL: Firebase credentials file not found: {settings.google_application_credentials}",
                file=sys.stderr,
            )
            sys.exit(1)

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Debug: {settings.debug}")
    print(f"   Storage: {provider.value}")

    return settings


if __name__ == "__main__":
    validate_environment()
