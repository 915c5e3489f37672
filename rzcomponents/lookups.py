"""Lookups of pre-existing AWS resources.

Components read clusters, autoscaling groups, load balancers, listeners,
hosted zones, certificates and the caller identity through the ``pulumi_aws``
data sources. The helpers below run those invokes synchronously, before the
calling component registers any resource, and turn every failure into an
``ExternalLookupError`` whose context names the data source and the query.
Nothing here ever creates or modifies a resource.
"""

import logging
from typing import Any, Callable, Optional

import pulumi
import pulumi_aws as aws

from rzcomponents.exceptions import ExternalLookupError

logger = logging.getLogger(__name__)

# Data sources components look up, keyed by the Pulumi invoke token
ECS_CLUSTER = "aws:ecs/getCluster:getCluster"
AUTOSCALING_GROUP = "aws:autoscaling/getGroup:getGroup"
LOAD_BALANCER = "aws:lb/getLoadBalancer:getLoadBalancer"
LOAD_BALANCER_LISTENER = "aws:lb/getListener:getListener"
ROUTE53_ZONE = "aws:route53/getZone:getZone"
ACM_CERTIFICATE = "aws:acm/getCertificate:getCertificate"
CALLER_IDENTITY = "aws:index/getCallerIdentity:getCallerIdentity"

LOOKUP_KINDS = (
    ECS_CLUSTER,
    AUTOSCALING_GROUP,
    LOAD_BALANCER,
    LOAD_BALANCER_LISTENER,
    ROUTE53_ZONE,
    ACM_CERTIFICATE,
    CALLER_IDENTITY,
)


def invoke_options(opts: Optional[pulumi.ResourceOptions]) -> Optional[pulumi.InvokeOptions]:
    """Invoke options carrying the parent and provider of a component's options."""
    if opts is None:
        return None
    return pulumi.InvokeOptions(parent=opts.parent, provider=opts.provider)


def _lookup(
    kind: str,
    invoke: Callable[..., Any],
    identity_attribute: str,
    opts: Optional[pulumi.InvokeOptions],
    **query: Any,
) -> Any:
    logger.debug(f"Looking up {kind} {query}")
    context = {"kind": kind, **query}
    try:
        result = invoke(**query, opts=opts)
    except Exception as e:
        logger.error(f"Lookup of {kind} failed: {e}")
        raise ExternalLookupError(f"Lookup of {kind} failed: {e}", context=context) from e
    if not getattr(result, identity_attribute, None):
        logger.error(f"Lookup of {kind} returned no {identity_attribute}")
        raise ExternalLookupError(f"No {kind} matches the lookup", context=context)
    logger.debug(f"Resolved {kind} {query}")
    return result


def get_cluster(cluster_name: str, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(ECS_CLUSTER, aws.ecs.get_cluster, "arn", opts, cluster_name=cluster_name)


def get_autoscaling_group(name: str, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(AUTOSCALING_GROUP, aws.autoscaling.get_group, "arn", opts, name=name)


def get_load_balancer(name: str, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(LOAD_BALANCER, aws.lb.get_load_balancer, "arn", opts, name=name)


def get_listener(load_balancer_arn: str, port: int, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(
        LOAD_BALANCER_LISTENER,
        aws.lb.get_listener,
        "arn",
        opts,
        load_balancer_arn=load_balancer_arn,
        port=port,
    )


def get_zone(zone_id: str, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(ROUTE53_ZONE, aws.route53.get_zone, "zone_id", opts, zone_id=zone_id)


def get_certificate(domain: str, opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(ACM_CERTIFICATE, aws.acm.get_certificate, "arn", opts, domain=domain)


def get_caller_identity(opts: Optional[pulumi.InvokeOptions] = None):
    return _lookup(CALLER_IDENTITY, aws.get_caller_identity, "account_id", opts)
