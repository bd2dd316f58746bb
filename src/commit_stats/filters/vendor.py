"""Vendored-path detection for excluding third-party content from stats."""

from __future__ import annotations

import fnmatch
import re

# Subset of the linguist vendor.yml patterns, matched against posix paths.
_VENDOR_PATTERNS = (
    r"(^|/)cache/",
    r"^[Dd]ependencies/",
    r"(^|/)dist/",
    r"^deps/",
    r"(^|/)configure$",
    r"(^|/)config\.guess$",
    r"(^|/)config\.sub$",
    r"(^|/)aclocal\.m4",
    r"(^|/)libtool\.m4",
    r"(^|/)lt(options|sugar|version|~obsolete)\.m4",
    r"cpplint\.py",
    r"node_modules/",
    r"bower_components/",
    r"Godeps/_workspace/",
    r"(\.|-)min\.(js|css)$",
    r"(^|/)bootstrap([^.]*)\.(js|css|less|scss|styl)$",
    r"(^|/)font-?awesome([^/]*)\.(css|less|scss|styl)$",
    r"(^|/)normalize\.(css|less|scss|styl)$",
    r"(^|/)jquery([^.]*)\.js$",
    r"(^|/)jquery-\d\.\d+(\.\d+)?\.js$",
    r"third[-_]?party/",
    r"3rd[-_]?party/",
    r"vendors?/",
    r"extern(al)?/",
    r"(^|/)[Vv]+endor/",
    r"^debian/",
    r"(^|/)gradlew(\.bat)?$",
    r"(^|/)gradle/wrapper/",
    r"(^|/)mvnw(\.cmd)?$",
    r"(^|/)\.mvn/wrapper/",
    r"(^|/)Carthage/",
    r"(^|/)Pods/",
    r"(^|/)\.git(attributes|ignore|modules)$",
    r"(^|/)\.travis\.yml$",
)
_VENDOR_RE = re.compile("|".join(f"(?:{pattern})" for pattern in _VENDOR_PATTERNS))


def is_vendor_path(path: str, extra_globs: tuple[str, ...] = ()) -> bool:
    """Return True when a path is vendored by default rules or configured globs."""
    normalized = path.replace("\\", "/").lstrip("/")
    if _VENDOR_RE.search(normalized) is not None:
        return True
    anchored = f"/{normalized}"
    return any(
        fnmatch.fnmatch(normalized, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in extra_globs
    )
