"""Declaration log for rzcomponents.

Pulumi owns the resources, their outputs and the dependency graph the engine
walks. ``ResourceGraph`` only keeps a record of what components declared: the
component tree, the type of every child resource, and the explicit
``depends_on`` and ``ignore_changes`` options it was given. The record is what
the drawing and export helpers work from, so a stack can be reviewed before
``pulumi up``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from rzcomponents.exceptions import ConfigurationError
from rzcomponents.utils.graph_utils import find_missing_dependencies, topological_order

logger = logging.getLogger(__name__)


def resource_type_of(resource: Any) -> str:
    """Short type label of a resource object, e.g. 'aws.s3.Bucket'."""
    cls = type(resource)
    package, *modules = cls.__module__.split(".")
    return ".".join([package.replace("pulumi_", ""), *modules[:-1], cls.__name__])


@dataclass(frozen=True)
class ResourceNode:
    """A resource declared by a component.

    Attributes:
        resource_type: Short type label (e.g. 'aws.ecs.Service')
        name: Unique logical name, '<component-name>-<suffix>'
        owner: Name of the component that declared the resource
        depends_on: Names of resources it was explicitly ordered after
        ignore_changes: Properties Pulumi was told not to reconcile
    """

    resource_type: str
    name: str
    owner: str
    depends_on: Tuple[str, ...] = ()
    ignore_changes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentRecord:
    """Registration of a component in the log."""

    type_token: str
    name: str
    parent: Optional[str] = None


class ResourceGraph:
    """Record of declared components and the resources they own."""

    def __init__(self) -> None:
        self._nodes: Dict[str, ResourceNode] = {}
        self._components: Dict[str, ComponentRecord] = {}
        # id() of each recorded resource object -> logical name
        self._names: Dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[ResourceNode]:
        return iter(list(self._nodes.values()))

    @property
    def nodes(self) -> List[ResourceNode]:
        return list(self._nodes.values())

    @property
    def components(self) -> List[ComponentRecord]:
        return list(self._components.values())

    def node(self, name: str) -> ResourceNode:
        try:
            return self._nodes[name]
        except KeyError:
            raise ConfigurationError(
                f"Resource '{name}' is not recorded", context={"resource": name}
            ) from None

    def nodes_of_type(self, resource_type: str) -> List[ResourceNode]:
        return [node for node in self._nodes.values() if node.resource_type == resource_type]

    def register_component(
        self, type_token: str, name: str, parent: Optional[str] = None
    ) -> ComponentRecord:
        """Register a component so resources can name it as their owner.

        Raises:
            ConfigurationError: If the name is taken or the parent is unknown
        """
        if name in self._components:
            raise ConfigurationError(
                f"Component '{name}' is already registered",
                context={"type": type_token, "existing": self._components[name].type_token},
            )
        if parent is not None and parent not in self._components:
            raise ConfigurationError(
                f"Parent component '{parent}' is not registered", context={"component": name}
            )
        record = ComponentRecord(type_token, name, parent)
        self._components[name] = record
        return record

    def name_of(self, resource: Any) -> str:
        try:
            return self._names[id(resource)]
        except KeyError:
            raise ConfigurationError(
                "Dependency was not declared through a component",
                context={"type": resource_type_of(resource)},
            ) from None

    def record(
        self,
        resource: Any,
        name: str,
        owner: str,
        depends_on: Iterable[Any] = (),
        ignore_changes: Iterable[str] = (),
    ) -> ResourceNode:
        """Record a resource declared by a component.

        Raises:
            ConfigurationError: If the name is taken, the owner is unknown or
                a dependency was never recorded
        """
        if name in self._nodes:
            raise ConfigurationError(
                f"Resource name '{name}' is already declared",
                context={"existing": self._nodes[name].resource_type},
            )
        if owner not in self._components:
            raise ConfigurationError(
                f"Owner '{owner}' of resource '{name}' is not registered",
                context={"resource": name},
            )
        node = ResourceNode(
            resource_type=resource_type_of(resource),
            name=name,
            owner=owner,
            depends_on=tuple(self.name_of(dependency) for dependency in depends_on),
            ignore_changes=tuple(ignore_changes),
        )
        self._nodes[name] = node
        self._names[id(resource)] = name
        logger.debug(f"Recorded {node.resource_type} {name} (owner: {owner})")
        return node

    def owned_by(self, component: str) -> List[ResourceNode]:
        """Resources declared directly by a component."""
        return [node for node in self._nodes.values() if node.owner == component]

    def descendants(self, component: str) -> List[str]:
        """Names of the component and every component nested under it."""
        names = [component]
        for name in names:
            names.extend(
                record.name for record in self._components.values() if record.parent == name
            )
        return names

    def discard_component(self, component: str) -> None:
        """Forget a component, its nested components and all their resources."""
        names = set(self.descendants(component))
        for node_name in [n.name for n in self._nodes.values() if n.owner in names]:
            del self._nodes[node_name]
        self._names = {key: value for key, value in self._names.items() if value in self._nodes}
        for name in names:
            self._components.pop(name, None)
        logger.debug(f"Discarded component {component} and {len(names) - 1} nested components")

    def graphdict(self) -> Dict[str, List[str]]:
        """Adjacency dict mapping every resource to its explicit dependencies."""
        return {name: list(node.depends_on) for name, node in self._nodes.items()}

    def edges(self) -> List[Tuple[str, str]]:
        """(resource, dependency) pairs for every explicit edge."""
        return [
            (name, dependency)
            for name, dependencies in self.graphdict().items()
            for dependency in dependencies
        ]

    def validate(self) -> None:
        """Check that every dependency is recorded and the edges are acyclic.

        Raises:
            ConfigurationError: On an unknown dependency or a cycle
        """
        graphdict = self.graphdict()
        missing = find_missing_dependencies(graphdict)
        if missing:
            node, dependency = missing[0]
            raise ConfigurationError(
                f"Resource '{node}' depends on unrecorded resource '{dependency}'",
                context={"missing": len(missing)},
            )
        topological_order(graphdict)

    def creation_order(self) -> List[str]:
        """Resource names ordered so explicit dependencies always come first."""
        self.validate()
        return topological_order(self.graphdict())

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-compatible snapshot of the log."""
        return {
            "components": {
                record.name: {"type": record.type_token, "parent": record.parent}
                for record in self._components.values()
            },
            "resources": {
                node.name: {
                    "type": node.resource_type,
                    "owner": node.owner,
                    "depends_on": list(node.depends_on),
                    "ignore_changes": list(node.ignore_changes),
                }
                for node in self._nodes.values()
            },
        }
