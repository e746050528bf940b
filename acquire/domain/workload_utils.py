from typing import Optional

PLACEHOLDER_PREFIX = "${"
PLACEHOLDER_SUFFIX = "}"


def placeholder_token(key: str) -> str:
    """
    Normalize a `-v` override key into the token it replaces in the manifest.

    Bare names are wrapped (`Foo` -> `${Foo}`). Keys that already look like a
    placeholder, or that start with a digit and therefore name a literal
    version, are used as given.
    """
    if key.startswith(PLACEHOLDER_PREFIX) or key[:1].isdigit():
        return key
    return f"{PLACEHOLDER_PREFIX}{key}{PLACEHOLDER_SUFFIX}"


def package_folder_name(package_id: str) -> str:
    """NuGet lays packages out in the global packages folder by lower-cased id."""
    return package_id.lower()


def split_flag(token: str) -> Optional[tuple[str, str]]:
    """
    Split a `-name:value` token. Returns None when the token is not of that shape.
    """
    if not token.startswith("-"):
        return None
    name, sep, value = token.partition(":")
    if not sep:
        return None
    return name, value
