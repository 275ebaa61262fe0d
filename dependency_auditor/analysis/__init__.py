"""Policy checks for dependency-auditor."""
from dependency_auditor.analysis.advisories import (
    AdvisoryCheckResult,
    check_advisories,
)
from dependency_auditor.analysis.bans import (
    check_banned_packages,
    check_duplicate_versions,
    duplicate_exempt_ids,
    skip_tree_exempt_ids,
)
from dependency_auditor.analysis.evaluator import PolicyEvaluator, evaluate_policy
from dependency_auditor.analysis.licenses import (
    LicenseCheckResult,
    allowed_licenses_for,
    check_licenses,
    check_package_license,
    parse_license_expression,
)
from dependency_auditor.analysis.matching import spec_matches, version_matches

__all__ = [
    "AdvisoryCheckResult",
    "LicenseCheckResult",
    "PolicyEvaluator",
    "allowed_licenses_for",
    "check_advisories",
    "check_banned_packages",
    "check_duplicate_versions",
    "check_licenses",
    "check_package_license",
    "duplicate_exempt_ids",
    "evaluate_policy",
    "parse_license_expression",
    "skip_tree_exempt_ids",
    "spec_matches",
    "version_matches",
]
