"""Application-wide constants."""

# Site origin types
class SiteType:
    """Site origin type constants."""
    UPLOAD = "upload"
    URL = "url"
    CODE = "code"

    ALL = (UPLOAD, URL, CODE)


# Default display names when no project name is supplied
DEFAULT_SITE_NAMES = {
    SiteType.UPLOAD: "Untitled Project",
    SiteType.URL: "URL Project",
    SiteType.CODE: "Code Project",
}

# File naming
INDEX_FILENAME = "index.html"
JSON_FILENAME = "data.json"
HTML_SUFFIX = ".html"

BYTES_PER_MB = 1024 * 1024
