"""Path normalization and prefixing shared by both protocol ends."""

from common.exceptions import PathTraversalDetected


def normalize_path(path: str) -> str:
    """
    Normalize a storage path into its slash-separated relative form.

    - Strips leading and trailing slashes
    - Collapses repeated slashes and drops "." segments
    - Rejects ".." segments and NUL bytes

    Args:
        path: Raw path as given by a caller or found in a URL

    Returns:
        Normalized path ("" denotes the storage root)

    Raises:
        PathTraversalDetected: If the path contains ".." or a NUL byte
    """
    if "\0" in path:
        raise PathTraversalDetected(path)

    segments = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise PathTraversalDetected(path)
        segments.append(segment)

    return "/".join(segments)


class PathPrefixer:
    """Applies and strips a fixed path prefix."""

    def __init__(self, prefix: str = "", separator: str = "/"):
        self.separator = separator
        self.prefix = prefix.strip(separator)
        if self.prefix:
            self.prefix += separator

    def prefix_path(self, path: str) -> str:
        return self.prefix + path.lstrip(self.separator)

    def contains(self, path: str) -> bool:
        """Whether a prefixed-space path is the prefix itself or lies below it."""
        path = path.strip(self.separator)
        if not self.prefix:
            return True
        return path == self.prefix.rstrip(self.separator) or path.startswith(self.prefix)

    def strip_prefix(self, path: str) -> str:
        """
        Remove the prefix from a path in prefixed space.

        Paths outside the prefix are returned unchanged; the bare prefix
        strips to the root.
        """
        path = path.strip(self.separator)
        if not self.prefix:
            return path
        if path == self.prefix.rstrip(self.separator):
            return ""
        if path.startswith(self.prefix):
            return path[len(self.prefix):]
        return path

    def prefix_directory_path(self, path: str) -> str:
        prefixed = self.prefix_path(path)
        if not prefixed or prefixed.endswith(self.separator):
            return prefixed
        return prefixed + self.separator
