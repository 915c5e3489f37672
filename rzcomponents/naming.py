"""Canonical resource names and default tags."""

from typing import Dict, NamedTuple, Optional

from rzcomponents.config.aws_defaults import DESCRIPTION_TEMPLATE


class Naming(NamedTuple):
    full_name: str
    default_tags: Dict[str, str]


def compute_naming(env_name: str, app_name: str, purpose: Optional[str] = None) -> Naming:
    """Compute the full name and default tag set for an application.

    Empty parts are skipped when joining, so ``purpose=None`` yields
    ``'<env>-<app>'`` and no ``Purpose`` tag.

    Examples:
        >>> compute_naming("development", "my-app", "api").full_name
        'development-my-app-api'
    """
    full_name = "-".join(part for part in (env_name, app_name, purpose) if part)
    default_tags = {
        "Name": full_name,
        "Environment": env_name,
        "Application": app_name,
        "Description": DESCRIPTION_TEMPLATE.format(full_name=full_name),
        "Pulumi": "true",
    }
    if purpose:
        default_tags["Purpose"] = purpose
    return Naming(full_name, default_tags)
