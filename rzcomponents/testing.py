"""Pulumi mocks backed by an inventory of pre-existing AWS resources.

``InventoryMocks`` lets a program built from rzcomponents run under
``pulumi.runtime.set_mocks`` without an AWS account:

- data-source invokes (``aws.ecs.getCluster``, ``aws.route53.getZone``, ...)
  are answered from an inventory ``{invoke token: [attribute dicts]}``; an
  invoke nothing matches returns an empty result, which the lookup helpers
  report as ``ExternalLookupError``
- ``aws.getCallerIdentity`` returns the configured account
- ``aws.iam.getPolicyDocument`` renders the statements into IAM JSON
- every registered resource is recorded with its inputs, keyed by logical
  name, and gets an id, an ARN and the computed attributes components read

Inventory attributes and recorded inputs use snake_case keys.

Examples:
    >>> mocks = InventoryMocks(account_id="123456789012")
    >>> mocks.add(ECS_CLUSTER, cluster_name="main", arn="arn:aws:ecs:...", id="arn:aws:ecs:...")
    >>> pulumi.runtime.set_mocks(mocks, preview=False)
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pulumi

from rzcomponents.config.aws_defaults import POLICY_VERSION
from rzcomponents.exceptions import ConfigurationError
from rzcomponents.lookups import CALLER_IDENTITY, LOOKUP_KINDS

logger = logging.getLogger(__name__)

POLICY_DOCUMENT = "aws:iam/getPolicyDocument:getPolicyDocument"
DEFAULT_ACCOUNT_ID = "000000000000"

# Attributes AWS computes on create that components read back
COMPUTED_ATTRIBUTES = {
    "aws:s3/bucket:Bucket": lambda name, inputs: {
        "bucket_regional_domain_name": f"{inputs.get('bucket', name)}.s3.amazonaws.com",
    },
    "aws:cloudfront/originAccessIdentity:OriginAccessIdentity": lambda name, inputs: {
        "iam_arn": f"arn:aws:iam::cloudfront:user/CloudFront Origin Access Identity {name}",
        "cloudfront_access_identity_path": f"origin-access-identity/cloudfront/{name}",
    },
    "aws:cloudfront/distribution:Distribution": lambda name, inputs: {
        "domain_name": f"{name}.cloudfront.net",
    },
}

_CAMEL_KEY = re.compile(r"^[a-z][a-zA-Z0-9]*$")


def snake_case(key: str) -> str:
    if not _CAMEL_KEY.match(key):
        return key
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def camel_case(key: str) -> str:
    first, *rest = key.split("_")
    return first + "".join(part.title() for part in rest)


def snake_keys(value: Any) -> Any:
    """Rename camelCase keys to snake_case at every level of a value."""
    if isinstance(value, Mapping):
        return {snake_case(key): snake_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [snake_keys(item) for item in value]
    return value


def _collapse(values: Sequence[Any]) -> Any:
    # Single values are written unwrapped, as the IAM policy grammar allows
    return values[0] if len(values) == 1 else list(values)


def render_statement(statement: Mapping[str, Any]) -> Dict[str, Any]:
    """IAM JSON form of one ``getPolicyDocument`` statement."""
    result: Dict[str, Any] = {}
    if statement.get("sid"):
        result["Sid"] = statement["sid"]
    result["Effect"] = statement.get("effect", "Allow")
    result["Action"] = _collapse(statement["actions"])
    if statement.get("resources"):
        result["Resource"] = _collapse(statement["resources"])
    principals = statement.get("principals") or []
    if len(principals) == 1 and principals[0]["type"] == "*":
        result["Principal"] = "*"
    elif principals:
        result["Principal"] = {p["type"]: _collapse(p["identifiers"]) for p in principals}
    conditions = statement.get("conditions") or []
    if conditions:
        block: Dict[str, Dict[str, Any]] = {}
        for condition in conditions:
            block.setdefault(condition["test"], {})[condition["variable"]] = list(
                condition["values"]
            )
        result["Condition"] = block
    return result


def render_policy_document(statements: Sequence[Mapping[str, Any]]) -> str:
    """Policy JSON for a list of statements; an empty list is valid."""
    document = {
        "Version": POLICY_VERSION,
        "Statement": [render_statement(statement) for statement in statements],
    }
    return json.dumps(document, indent=2)


class InventoryMocks(pulumi.runtime.Mocks):
    """Pulumi mocks answering lookups from a fixed inventory."""

    def __init__(
        self,
        inventory: Optional[Mapping[str, List[Mapping[str, Any]]]] = None,
        account_id: str = DEFAULT_ACCOUNT_ID,
    ):
        self.inventory: Dict[str, List[Dict[str, Any]]] = {}
        self.account_id = account_id
        self.resources: Dict[str, Tuple[str, Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        for kind, entries in (inventory or {}).items():
            for entry in entries:
                self.add(kind, **entry)

    @classmethod
    def from_json(cls, path: str) -> "InventoryMocks":
        """Load an inventory file.

        The file holds ``{"account_id": "...", "resources": {token: [...]}}``
        and must be UTF-8 encoded JSON.

        Raises:
            ConfigurationError: If the file cannot be read, decoded or parsed,
                or does not hold a JSON object
        """
        try:
            with open(Path(path), "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Could not load inventory: {e}", context={"path": path}
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Inventory file must hold a JSON object",
                context={"path": path, "found": type(data).__name__},
            )
        logger.info(f"Loaded inventory from {path}")
        return cls(
            data.get("resources", {}), account_id=data.get("account_id", DEFAULT_ACCOUNT_ID)
        )

    def add(self, kind: str, **attributes: Any) -> "InventoryMocks":
        if kind not in LOOKUP_KINDS or kind == CALLER_IDENTITY:
            raise ConfigurationError(
                f"Unknown lookup kind '{kind}'", context={"supported": ", ".join(LOOKUP_KINDS)}
            )
        self.inventory.setdefault(kind, []).append(dict(attributes))
        return self

    def find(self, kind: str, query: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """First inventory entry matching every query value that is set."""
        for entry in self.inventory.get(kind, []):
            if all(entry.get(key) == value for key, value in query.items() if value is not None):
                return entry
        return None

    def inputs(self, name: str) -> Dict[str, Any]:
        """Inputs a resource was registered with, keys in snake_case."""
        try:
            return self.resources[name][1]
        except KeyError:
            raise ConfigurationError(
                f"Resource '{name}' was not registered", context={"resource": name}
            ) from None

    def type_of(self, name: str) -> str:
        self.inputs(name)
        return self.resources[name][0]

    def names(self, prefix: str = "") -> List[str]:
        return [name for name in self.resources if name.startswith(prefix)]

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        inputs = snake_keys(dict(args.inputs))
        self.resources[args.name] = (args.typ, inputs)
        state = {
            "arn": f"arn:aws:mock:::{args.name}",
            **inputs,
            **COMPUTED_ATTRIBUTES.get(args.typ, lambda name, inputs: {})(args.name, inputs),
        }
        return f"{args.name}-id", {camel_case(key): value for key, value in state.items()}

    def call(self, args: pulumi.runtime.MockCallArgs):
        query = snake_keys(dict(args.args))
        self.calls.append((args.token, query))
        if args.token == CALLER_IDENTITY:
            return {"accountId": self.account_id, "id": self.account_id}
        if args.token == POLICY_DOCUMENT:
            document = render_policy_document(query.get("statements") or [])
            return {"json": document, "id": "policy-document"}
        entry = self.find(args.token, query)
        if entry is None:
            logger.debug(f"No inventory entry for {args.token} {query}")
            return {}
        return {camel_case(key): value for key, value in entry.items()}
