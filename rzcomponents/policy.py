"""IAM policy statements and document assembly.

Statements are plain values; a document is the ordered concatenation of the
statements a component chose to include. Resources and principal identifiers
may be Pulumi outputs (for example a bucket ARN that only exists after the
bucket is created). The document itself is rendered by the
``aws.iam.getPolicyDocument`` data source, so it resolves once every output
it embeds has resolved.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pulumi
import pulumi_aws as aws

from rzcomponents.exceptions import ConfigurationError

EFFECTS = ("Allow", "Deny")


@dataclass(frozen=True)
class PolicyPrincipal:
    type: str
    identifiers: Tuple[Any, ...]


@dataclass(frozen=True)
class PolicyCondition:
    test: str
    variable: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class PolicyStatement:
    actions: Tuple[str, ...]
    resources: Tuple[Any, ...] = ()
    principals: Tuple[PolicyPrincipal, ...] = ()
    conditions: Tuple[PolicyCondition, ...] = ()
    effect: str = "Allow"
    sid: str = ""


def statement_args(statement: PolicyStatement) -> Dict[str, Any]:
    """Convert one statement to ``getPolicyDocument`` statement arguments.

    Raises:
        ConfigurationError: If the statement is malformed
    """
    if statement.effect not in EFFECTS:
        raise ConfigurationError(
            f"Invalid policy effect '{statement.effect}'",
            context={"sid": statement.sid, "allowed": "/".join(EFFECTS)},
        )
    if not statement.actions:
        raise ConfigurationError("Policy statement has no actions", context={"sid": statement.sid})
    for principal in statement.principals:
        if not principal.identifiers:
            raise ConfigurationError(
                "Policy principal has no identifiers",
                context={"sid": statement.sid, "type": principal.type},
            )

    args: Dict[str, Any] = {"effect": statement.effect, "actions": list(statement.actions)}
    if statement.sid:
        args["sid"] = statement.sid
    if statement.resources:
        args["resources"] = list(statement.resources)
    if statement.principals:
        args["principals"] = [
            {"type": principal.type, "identifiers": list(principal.identifiers)}
            for principal in statement.principals
        ]
    if statement.conditions:
        args["conditions"] = [
            {"test": c.test, "variable": c.variable, "values": list(c.values)}
            for c in statement.conditions
        ]
    return args


def policy_document(
    statements: Sequence[PolicyStatement], opts: Optional[pulumi.InvokeOptions] = None
) -> pulumi.Output:
    """Assemble statements into a policy document.

    Statements are validated before anything is invoked. An empty statement
    list is valid and yields a document with no statements.

    Args:
        statements: Statements in the order they should appear
        opts: Invoke options, usually parented to the calling component

    Returns:
        pulumi.Output: The policy document as a JSON string

    Raises:
        ConfigurationError: If any statement is malformed
    """
    args: List[Dict[str, Any]] = [statement_args(statement) for statement in statements]
    return aws.iam.get_policy_document_output(statements=args, opts=opts).json
