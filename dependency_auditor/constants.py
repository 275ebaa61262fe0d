"""Constants for dependency-auditor."""

# Exit codes
EXIT_SUCCESS = 0  # No violations found
EXIT_VIOLATIONS = 1  # Policy violations found
EXIT_ERROR = 2  # Audit failed due to error

# Only the v2 advisories table layout is understood
SUPPORTED_ADVISORY_VERSIONS = (2,)

# Separator between name and version in package ids
PACKAGE_ID_SEPARATOR = "@"

# A version field starting with one of these is a specifier, not an exact version
VERSION_OPERATORS = ("<", ">", "=", "!", "~")

# Section headings for each kind of finding
VIOLATION_KIND_LABELS = {
    "license": "License Violations",
    "advisory": "Advisory Violations",
    "banned": "Banned Packages",
    "duplicate": "Duplicate Versions",
}
