"""
PrayLine Version Information
Central version management for the PrayLine project.
"""

# Semantic Versioning: MAJOR.MINOR.PATCH
VERSION = "1.0.0"

APP_NAME = "PrayLine"


def get_version() -> str:
    """Get the current version string.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    return VERSION


def get_app_info() -> str:
    """Get application name and version.

    Returns:
        str: Application name and version in format "AppName vX.Y.Z"
    """
    return f"{APP_NAME} v{get_version()}"
