"""Base class for components.

A component is a ``pulumi.ComponentResource`` with the type token
``rzdevelop:components:<Type>``. Construction runs in three steps:

1. ``resolve`` performs the external lookups the component needs. It runs
   before the component registers with Pulumi, so a failed lookup leaves
   nothing declared.
2. The component registers and ``build`` declares its children through
   ``declare`` and ``create_child``, each parented to the component.
3. ``register_outputs`` publishes the values returned by ``outputs``.

When a ``ResourceGraph`` is passed, every declaration is also recorded there
for drawing and export. Nested components share their parent's graph.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

import pulumi

from rzcomponents.config.aws_defaults import TYPE_PREFIX
from rzcomponents.graph import ResourceGraph
from rzcomponents.lookups import invoke_options

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="Component")


class Component(pulumi.ComponentResource):
    """Owner of a group of resources declared from one options object."""

    type_name = "Component"

    def __init__(
        self,
        name: str,
        options: Any,
        opts: Optional[pulumi.ResourceOptions] = None,
        graph: Optional[ResourceGraph] = None,
    ):
        self.name = name
        self.options = options
        self.type_token = f"{TYPE_PREFIX}:{self.type_name}"
        parent = opts.parent if opts is not None else None
        if graph is None and isinstance(parent, Component):
            graph = parent.graph
        self.graph = graph

        lookups = self.resolve(invoke_options(opts))

        if graph is not None:
            graph.register_component(
                self.type_token, name, parent.name if isinstance(parent, Component) else None
            )
        super().__init__(self.type_token, name, None, opts)
        try:
            self.build(lookups)
        except BaseException:
            if graph is not None:
                graph.discard_component(name)
            raise
        self.register_outputs(self.outputs())
        logger.info(f"Built {self.type_token} {name}")

    def resolve(self, opts: Optional[pulumi.InvokeOptions]) -> Any:
        """Look up external resources; runs before anything is registered."""
        return None

    def build(self, lookups: Any) -> None:
        raise NotImplementedError

    def outputs(self) -> Dict[str, Any]:
        return {}

    def build_name(self, suffix: str) -> str:
        return f"{self.name}-{suffix}"

    def invoke_opts(self) -> pulumi.InvokeOptions:
        return pulumi.InvokeOptions(parent=self)

    def declare(
        self,
        resource_cls: Type[Any],
        suffix: str,
        depends_on: Iterable[pulumi.Resource] = (),
        ignore_changes: Iterable[str] = (),
        **props: Any,
    ) -> Any:
        """Declare a resource owned by this component.

        Args:
            resource_cls: pulumi_aws resource class, e.g. ``aws.s3.Bucket``
            suffix: Appended to the component name to form the resource name
            depends_on: Resources that must exist before this one
            ignore_changes: Properties Pulumi must not reconcile after creation
            **props: Resource arguments
        """
        depends_on = list(depends_on)
        ignore_changes = list(ignore_changes)
        name = self.build_name(suffix)
        resource = resource_cls(
            name,
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=depends_on or None,
                ignore_changes=ignore_changes or None,
            ),
            **props,
        )
        if self.graph is not None:
            self.graph.record(resource, name, self.name, depends_on, ignore_changes)
        return resource

    def create_child(self, component_cls: Type[C], suffix: str, options: Any) -> C:
        return component_cls(
            self.build_name(suffix),
            options,
            opts=pulumi.ResourceOptions(parent=self),
            graph=self.graph,
        )
