from typing import Any, Dict, List
from urllib.parse import urlparse

PROFILE_FIELDS = {
    "user_id",
    "full_name",
    "alternative_email",
    "location",
    "phone",
    "bio",
    "preference",
    "linkedin_url",
    "github_url",
    "portfolio_url",
    "skills",
    "academics",
    "certifications",
    "experiences",
    "portfolio_items",
    "resume_url",
    "profile_pic_url",
    "role",
    "created_at",
    "updated_at",
}
PROFILE_LIST_FIELDS = ["academics", "certifications", "experiences", "portfolio_items"]
PROFILE_URL_FIELDS = ["linkedin_url", "github_url", "portfolio_url"]
PROFILE_ROLES = {"candidate", "recruiter"}

MIN_NAME_LENGTH = 2
MAX_BIO_LENGTH = 500

JOB_REQUIRED_STR_FIELDS = ["id", "title"]
JOB_OPTIONAL_STR_FIELDS = ["description", "location", "requirements", "recruiter_id"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def validate_profile(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Only fields present in `data` are checked, so partial updates validate too.
    """
    errors: List[str] = []

    unknown = sorted(set(data) - PROFILE_FIELDS)
    for f in unknown:
        errors.append(f"Unknown profile field: {f}")

    if "full_name" in data:
        name = data["full_name"]
        if not isinstance(name, str) or len(name.strip()) < MIN_NAME_LENGTH:
            errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters")

    bio = data.get("bio")
    if bio is not None:
        if not isinstance(bio, str):
            errors.append("Field 'bio' must be a string")
        elif len(bio) > MAX_BIO_LENGTH:
            errors.append(f"Bio must be less than {MAX_BIO_LENGTH} characters")

    # Empty string clears a link
    for f in PROFILE_URL_FIELDS:
        v = data.get(f)
        if v is None or v == "":
            continue
        if not isinstance(v, str) or not _valid_url(v):
            errors.append(f"Field '{f}' must be a valid absolute URL (scheme + host)")

    if "skills" in data and data["skills"] is not None:
        skills = data["skills"]
        if not isinstance(skills, list):
            errors.append("Field 'skills' must be a list")
        elif not all(_is_non_empty_str(s) for s in skills):
            errors.append("Field 'skills' must contain only non-empty strings")

    for f in PROFILE_LIST_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], list):
            errors.append(f"Field '{f}' must be a list")

    role = data.get("role")
    if role is not None and role not in PROFILE_ROLES:
        errors.append(f"Field 'role' must be one of: {', '.join(sorted(PROFILE_ROLES))}")

    return errors


def validate_job(data: Dict[str, Any]) -> List[str]:
    """Validate a job posting record before it enters the catalog."""
    errors: List[str] = []

    for f in JOB_REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in JOB_OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    company = data.get("company")
    if company is not None:
        if not isinstance(company, dict) or not _is_non_empty_str(company.get("name")):
            errors.append("Field 'company' must be an object with a non-empty 'name'")
        elif company.get("logo_url") and not _valid_url(company["logo_url"]):
            errors.append("Field 'company.logo_url' must be a valid absolute URL")

    return errors
