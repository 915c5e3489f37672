"""Security group with one ingress and one egress rule."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import OPEN_CIDR_BLOCKS


@dataclass(frozen=True)
class SecurityGroupRuleOptions:
    from_port: int
    to_port: int
    protocol: str
    # None opens the rule to 0.0.0.0/0
    cidr_blocks: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class SecurityGroupOptions:
    name: str
    ingress: SecurityGroupRuleOptions
    egress: SecurityGroupRuleOptions
    description: Optional[str] = None
    vpc_id: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)


class SecurityGroup(Component):
    type_name = "SecurityGroup"

    def build(self, lookups) -> None:
        options: SecurityGroupOptions = self.options
        self.security_group = self.declare(
            aws.ec2.SecurityGroup,
            "security-group",
            name=options.name,
            description=options.description or f"{options.name} SecurityGroup",
            vpc_id=options.vpc_id,
            tags=dict(options.tags),
        )
        self.ingress_rule = self._declare_rule("ingress", options.ingress)
        self.egress_rule = self._declare_rule("egress", options.egress)

    def _declare_rule(self, direction: str, rule: SecurityGroupRuleOptions):
        return self.declare(
            aws.ec2.SecurityGroupRule,
            direction,
            type=direction,
            security_group_id=self.security_group.id,
            from_port=rule.from_port,
            to_port=rule.to_port,
            protocol=rule.protocol,
            cidr_blocks=list(OPEN_CIDR_BLOCKS if rule.cidr_blocks is None else rule.cidr_blocks),
        )

    def outputs(self):
        return {"security_group_id": self.security_group.id}
