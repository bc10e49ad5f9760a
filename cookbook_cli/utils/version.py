"""
Version token handling for cookbook requests.
"""

# The server endpoint that always points at the newest cookbook version.
LATEST_VERSION = "_latest"


def resolve_version(version: str) -> str:
    """Maps '' and 'latest' to the '_latest' endpoint; anything else is kept."""
    if version in ("", "latest"):
        return LATEST_VERSION
    return version
