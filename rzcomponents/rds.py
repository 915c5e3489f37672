"""RDS instance with development-grade defaults.

The instance is single-AZ, publicly accessible, keeps no automated backups and
skips the final snapshot on deletion. These defaults trade durability for cost
and are meant for non-production environments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import pulumi
import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import RDS_DEFAULTS


@dataclass(frozen=True)
class RdsOptions:
    name: str
    identifier: str
    username: str
    password: pulumi.Input[str]
    vpc_security_group_ids: Tuple[pulumi.Input[str], ...]
    engine: Optional[str] = None
    engine_version: Optional[str] = None
    instance_class: Optional[str] = None
    storage_type: Optional[str] = None
    allocated_storage: Optional[int] = None
    max_allocated_storage: Optional[int] = None
    parameter_group_name: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)


def _with_default(options: RdsOptions, key: str) -> Any:
    value = getattr(options, key)
    return RDS_DEFAULTS[key] if value is None else value


class Rds(Component):
    type_name = "Rds"

    def build(self, lookups) -> None:
        options: RdsOptions = self.options
        self.instance = self.declare(
            aws.rds.Instance,
            "instance",
            engine=_with_default(options, "engine"),
            parameter_group_name=_with_default(options, "parameter_group_name"),
            engine_version=_with_default(options, "engine_version"),
            identifier=options.identifier,
            username=options.username,
            password=options.password,
            instance_class=_with_default(options, "instance_class"),
            storage_type=_with_default(options, "storage_type"),
            allocated_storage=_with_default(options, "allocated_storage"),
            max_allocated_storage=_with_default(options, "max_allocated_storage"),
            vpc_security_group_ids=list(options.vpc_security_group_ids),
            db_name=options.name,
            multi_az=False,
            publicly_accessible=True,
            backup_retention_period=0,
            skip_final_snapshot=True,
            final_snapshot_identifier=f"{options.identifier}-final-snapshot",
            tags=dict(options.tags),
        )

    def outputs(self):
        return {"endpoint": self.instance.endpoint}
