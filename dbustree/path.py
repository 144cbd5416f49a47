"""Helpers for D-Bus object paths."""


def count_elements(path):
    """Return the number of elements in ``path``."""
    if not path or path == "/":
        return 0
    return path.count("/")


def split_elements(path):
    """Split ``path`` into its elements, without the root."""
    if not path or path == "/":
        return []
    rest = path[1:]
    if not rest:
        return []
    elements = rest.split("/")
    if rest.endswith("/"):
        elements.pop()
    return elements


def fetch_elements(path, count):
    """Return the leading ``count`` elements of ``path`` as a path."""
    if count == 0:
        return "/"
    if count > count_elements(path):
        return path
    return "".join("/" + element for element in split_elements(path)[:count])


def is_descendant(base, path):
    """Tell whether ``path`` lies below ``base``."""
    if not base or not path:
        return False
    if base == path:
        return False
    if base == "/":
        return True
    return path.startswith(base)


def is_ascendant(base, path):
    """Tell whether ``path`` is not below ``base`` (and differs from it)."""
    if not base or not path:
        return False
    if base == path:
        return False
    return not is_descendant(base, path)


def is_child(base, path):
    """Tell whether ``path`` is a direct child of ``base``."""
    if not base or not path:
        return False
    if base == path:
        return False
    if not is_descendant(base, path):
        return False
    return count_elements(base) + 1 == count_elements(path)


def is_parent(base, path):
    """Tell whether ``path`` is the direct parent of ``base``."""
    if not base or not path:
        return False
    if base == path:
        return False
    if not is_ascendant(base, path):
        return False
    return count_elements(base) - 1 == count_elements(path)


def next_child(base, path):
    """Return the child of ``base`` on the way to ``path``."""
    return fetch_elements(path, count_elements(base) + 1)