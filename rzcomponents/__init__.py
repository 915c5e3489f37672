"""Composable Pulumi components that declare AWS resources.

Example (inside a Pulumi program):
    graph = ResourceGraph()
    site = StaticWebsite("site", StaticWebsiteOptions(name="my-site"), graph=graph)
    pulumi.export("domain_name", site.cdn.distribution.domain_name)
    render_graph(graph, "site")
"""

from .bucket import Bucket, BucketOptions
from .cloudfront import Cloudfront, CloudfrontOptions
from .cloudwatch import CloudWatch, CloudWatchOptions
from .component import Component
from .ecs_ec2 import (
    EcsEc2,
    EcsEc2Options,
    HealthCheckOptions,
    LoadBalancerOptions,
    MetricAlarmRule,
    Route53Options,
    ScheduleOptions,
    TurnOnAndOffScheduleOptions,
    default_metric_alarm_rules,
)
from .ecs_task_role import EcsTaskRole, EcsTaskRoleOptions
from .exceptions import (
    ComponentError,
    ConfigurationError,
    ExternalLookupError,
    ProvisioningError,
)
from .graph import ResourceGraph, ResourceNode
from .naming import Naming, compute_naming
from .rds import Rds, RdsOptions
from .rds_database import RdsDatabase, RdsDatabaseOptions
from .security_group import SecurityGroup, SecurityGroupOptions, SecurityGroupRuleOptions
from .static_website import (
    StaticWebsite,
    StaticWebsiteDomainOptions,
    StaticWebsiteOptions,
    StaticWebsiteRoute53Options,
)

__version__ = "0.1.0"

__all__ = [
    "Bucket",
    "BucketOptions",
    "CloudWatch",
    "CloudWatchOptions",
    "Cloudfront",
    "CloudfrontOptions",
    "Component",
    "ComponentError",
    "ConfigurationError",
    "EcsEc2",
    "EcsEc2Options",
    "EcsTaskRole",
    "EcsTaskRoleOptions",
    "ExternalLookupError",
    "HealthCheckOptions",
    "LoadBalancerOptions",
    "MetricAlarmRule",
    "Naming",
    "ProvisioningError",
    "Rds",
    "RdsDatabase",
    "RdsDatabaseOptions",
    "RdsOptions",
    "ResourceGraph",
    "ResourceNode",
    "Route53Options",
    "ScheduleOptions",
    "SecurityGroup",
    "SecurityGroupOptions",
    "SecurityGroupRuleOptions",
    "StaticWebsite",
    "StaticWebsiteDomainOptions",
    "StaticWebsiteOptions",
    "StaticWebsiteRoute53Options",
    "TurnOnAndOffScheduleOptions",
    "compute_naming",
    "default_metric_alarm_rules",
]
