"""Execution role assumable by ECS tasks."""

from dataclasses import dataclass

import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import ECS_TASKS_SERVICE_PRINCIPAL
from rzcomponents.policy import PolicyPrincipal, PolicyStatement, policy_document

TRUST_STATEMENT = PolicyStatement(
    sid="ECSTrustPolicy",
    effect="Allow",
    actions=("sts:AssumeRole",),
    principals=(PolicyPrincipal("Service", (ECS_TASKS_SERVICE_PRINCIPAL,)),),
)


@dataclass(frozen=True)
class EcsTaskRoleOptions:
    name: str


class EcsTaskRole(Component):
    type_name = "EcsTaskRole"

    def build(self, lookups) -> None:
        self.role = self.declare(
            aws.iam.Role,
            "role",
            name=f"{self.options.name}-task-role",
            assume_role_policy=policy_document([TRUST_STATEMENT], self.invoke_opts()),
        )

    def outputs(self):
        return {"role_arn": self.role.arn}
