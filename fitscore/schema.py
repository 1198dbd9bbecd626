from typing import Any, Dict, List

from .errors import ContractViolation

CANDIDATE_REQUIRED_FIELDS = ["contact", "skills", "experience"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _check_list_of_str(data: Dict[str, Any], key: str, where: str, errors: List[str]) -> None:
    value = data.get(key)
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"Field '{where}{key}' must be a list of strings if provided")


def _check_skill_list(skills: Any, key: str, errors: List[str]) -> None:
    if not isinstance(skills, list):
        errors.append(f"Field '{key}' must be a list")
        return
    for i, skill in enumerate(skills):
        if not isinstance(skill, dict):
            errors.append(f"{key}[{i}] must be an object")
            continue
        if not _is_non_empty_str(skill.get("name")):
            errors.append(f"{key}[{i}].name must be a non-empty string")
        importance = skill.get("importance")
        if importance is not None:
            if not _is_number(importance) or not 1 <= importance <= 5:
                errors.append(f"{key}[{i}].importance must be between 1 and 5")


def validate_requirement(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a requirement profile.
    Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Requirement profile must be an object"]
    errors: List[str] = []

    if "title" not in data:
        errors.append("Missing required field: title")
    elif not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")

    if "required_skills" not in data:
        errors.append("Missing required field: required_skills")
    else:
        _check_skill_list(data["required_skills"], "required_skills", errors)

    if data.get("preferred_skills") is not None:
        _check_skill_list(data["preferred_skills"], "preferred_skills", errors)

    experience = data.get("experience")
    if experience is not None:
        if not isinstance(experience, dict):
            errors.append("Field 'experience' must be an object if provided")
        else:
            min_years = experience.get("min_years")
            max_years = experience.get("max_years")
            if min_years is not None and (not _is_number(min_years) or min_years < 0):
                errors.append("experience.min_years must be a number >= 0")
            if max_years is not None:
                if not _is_number(max_years):
                    errors.append("experience.max_years must be a number")
                elif _is_number(min_years) and max_years < min_years:
                    errors.append("experience.max_years must be >= experience.min_years")
            for key in ("required_domains", "preferred_domains"):
                _check_list_of_str(experience, key, "experience.", errors)

    education = data.get("education")
    if education is not None:
        if not isinstance(education, dict):
            errors.append("Field 'education' must be an object if provided")
        else:
            for key in ("min_degree", "preferred_degree"):
                value = education.get(key)
                if value is not None and not isinstance(value, str):
                    errors.append(f"education.{key} must be a string")
            for key in ("required_fields", "preferred_fields"):
                _check_list_of_str(education, key, "education.", errors)

    return errors


def validate_candidate(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a candidate profile.
    Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Candidate profile must be an object"]
    errors: List[str] = []

    for f in CANDIDATE_REQUIRED_FIELDS:
        if f not in data or data[f] is None:
            errors.append(f"Missing required field: {f}")

    if data.get("contact") is not None and not isinstance(data["contact"], dict):
        errors.append("Field 'contact' must be an object")

    skills = data.get("skills")
    if skills is not None:
        if not isinstance(skills, list):
            errors.append("Field 'skills' must be a list")
        else:
            for i, skill in enumerate(skills):
                if not isinstance(skill, dict):
                    errors.append(f"skills[{i}] must be an object")

    experience = data.get("experience")
    if experience is not None:
        if not isinstance(experience, dict):
            errors.append("Field 'experience' must be an object")
        else:
            positions = experience.get("positions") or []
            if not isinstance(positions, list):
                errors.append("experience.positions must be a list if provided")
                positions = []
            for i, position in enumerate(positions):
                if not isinstance(position, dict):
                    errors.append(f"experience.positions[{i}] must be an object")
                    continue
                months = position.get("duration_months")
                if months is not None and (not _is_number(months) or months < 0):
                    errors.append(f"experience.positions[{i}].duration_months must be a number >= 0")

    for key in ("projects", "education"):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
            errors.append(f"Field '{key}' must be a list of objects if provided")

    return errors


def require_valid(data: Dict[str, Any], kind: str) -> None:
    """
    Raise ContractViolation if data fails validation.

    Args:
        data: Upstream profile dict
        kind: "requirement" or "candidate"
    """
    if kind == "requirement":
        errors = validate_requirement(data)
    elif kind == "candidate":
        errors = validate_candidate(data)
    else:
        raise ValueError(f"Unknown profile kind: {kind}")
    if errors:
        raise ContractViolation(errors, kind=kind)
