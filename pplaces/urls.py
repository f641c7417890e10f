"""Remote URL canonicalization for duplicate detection."""


class InvalidRemoteURLError(ValueError):
    """Input is neither an HTTPS nor an SSH remote URL."""


def is_remote_url(value: str) -> bool:
    """Check if a string looks like a clonable remote URL."""
    return value.startswith("http") or value.startswith("git@")


def canonical_suffix(url: str) -> str:
    """Reduce a remote URL to its host-independent `owner/repo` suffix.

    Examples:
        https://github.com/linebender/runebender (fetch) -> linebender/runebender
        git@github.com:gbrls/Bootloader.git (fetch)      -> gbrls/Bootloader

    Args:
        url: Remote URL, optionally followed by ` (fetch)`/` (push)`

    Returns:
        Canonical suffix, compared case-sensitively

    Raises:
        InvalidRemoteURLError: If the URL is neither `git@...` nor `http...`
    """
    value = url.split(" ", 1)[0]
    if value.endswith(".git"):
        value = value[: -len(".git")]

    if value.startswith("git@"):
        _, sep, suffix = value.partition(":")
        if not sep:
            raise InvalidRemoteURLError(f"Not a remote URL: {url}")
        return suffix

    if value.startswith("http"):
        return "/".join(value.split("/")[3:])

    raise InvalidRemoteURLError(f"Not a remote URL: {url}")


def same_repository(url_a: str, url_b: str) -> bool:
    """Check if two remote URLs point at the same repository."""
    return canonical_suffix(url_a) == canonical_suffix(url_b)
