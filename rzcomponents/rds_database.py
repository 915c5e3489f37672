"""Postgres database: a security group for port 5432 plus an RDS instance."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pulumi

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import OPEN_CIDR_BLOCKS, POSTGRES_PORT
from rzcomponents.rds import Rds, RdsOptions
from rzcomponents.security_group import (
    SecurityGroup,
    SecurityGroupOptions,
    SecurityGroupRuleOptions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RdsDatabaseOptions:
    name: str
    db_name: str
    username: str
    password: pulumi.Input[str]
    engine_version: Optional[str] = None
    # None leaves the database port open to 0.0.0.0/0
    allowed_cidr_blocks: Optional[Tuple[str, ...]] = None
    vpc_id: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)


class RdsDatabase(Component):
    type_name = "RdsDatabase"

    def build(self, lookups) -> None:
        options: RdsDatabaseOptions = self.options
        if options.allowed_cidr_blocks is None:
            logger.warning(
                f"Database {options.name} accepts connections from {OPEN_CIDR_BLOCKS[0]}"
            )

        self.security_group = self.create_child(
            SecurityGroup,
            "db-sg",
            SecurityGroupOptions(
                name=options.name,
                description=f"Security Group for {options.name}",
                vpc_id=options.vpc_id,
                ingress=SecurityGroupRuleOptions(
                    from_port=POSTGRES_PORT,
                    to_port=POSTGRES_PORT,
                    protocol="tcp",
                    cidr_blocks=options.allowed_cidr_blocks,
                ),
                egress=SecurityGroupRuleOptions(from_port=0, to_port=0, protocol="-1"),
                tags=options.tags,
            ),
        )

        self.rds = self.create_child(
            Rds,
            "rds",
            RdsOptions(
                name=options.db_name,
                identifier=options.name,
                username=options.username,
                password=options.password,
                engine_version=options.engine_version,
                vpc_security_group_ids=(self.security_group.security_group.id,),
                tags=options.tags,
            ),
        )

    def outputs(self):
        return {
            "endpoint": self.rds.instance.endpoint,
            "security_group_id": self.security_group.security_group.id,
        }
