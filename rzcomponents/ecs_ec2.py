"""ECS service on EC2 capacity with autoscaling, alarms and schedules.

Build sequence:

1. Resolve the existing cluster, autoscaling group and (with
   ``load_balancer_options``) the load balancer and its port-443 listener,
   the hosted zone (only with both load balancer and Route53 options) and the
   caller identity. All of this happens before the component registers, so a
   failed lookup leaves nothing declared.
2. Declare CNAME records pointing each alias at the load balancer.
3. Declare the log group, then the target group, listener rule and
   autoscaling attachment when a load balancer is used.
4. Declare the service, ordered after all of the above and ignoring drift in
   ``desiredCount``.
5. Declare the application autoscaling target after the service, one step
   scaling policy and metric alarm per enabled rule, and the on/off scheduled
   actions unless the schedule is disabled.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

import pulumi
import pulumi_aws as aws

from rzcomponents.cloudwatch import CloudWatch, CloudWatchOptions
from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import (
    AUTOSCALING_SERVICE_LINKED_ROLE,
    DEFAULT_MAX_CAPACITY,
    DEFAULT_MIN_CAPACITY,
    ECS_METRIC_ALARMS,
    ECS_SCHEDULE,
    HEALTH_CHECK_GRACE_PERIOD_SECONDS,
    LISTENER_PORT,
    LISTENER_RULE_PRIORITY_RANGE,
    METRIC_ALARM_NAMESPACE,
    RECORD_TTL,
    SCALABLE_DIMENSION,
    SCALING_POLICY_COOLDOWN,
    SERVICE_IGNORED_CHANGES,
    SERVICE_NAMESPACE,
    TARGET_GROUP_PORT,
    TARGET_GROUP_PROTOCOL,
)
from rzcomponents.exceptions import ConfigurationError
from rzcomponents.lookups import (
    get_autoscaling_group,
    get_caller_identity,
    get_cluster,
    get_listener,
    get_load_balancer,
    get_zone,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricAlarmRule:
    action: str
    comparison_operator: str
    threshold: float
    metric_name: str
    period: int
    statistic: str
    step_adjustment: Mapping[str, Any]
    disable: bool = False


def default_metric_alarm_rules(enable_memory: bool = False) -> Tuple[MetricAlarmRule, ...]:
    """The CPU and memory step-scaling rules; memory rules are off unless enabled."""
    rules = []
    for entry in ECS_METRIC_ALARMS:
        rule = MetricAlarmRule(**entry)
        if enable_memory and rule.metric_name == "MemoryUtilization":
            rule = MetricAlarmRule(**{**entry, "disable": False})
        rules.append(rule)
    return tuple(rules)


@dataclass(frozen=True)
class HealthCheckOptions:
    path: Optional[str] = None
    healthy_threshold: Optional[int] = None
    interval: Optional[int] = None
    timeout: Optional[int] = None


@dataclass(frozen=True)
class LoadBalancerOptions:
    name: str
    vpc_id: str
    priority: int
    health_check_options: Optional[HealthCheckOptions] = None

    def __post_init__(self):
        low, high = LISTENER_RULE_PRIORITY_RANGE
        if not low <= self.priority <= high:
            raise ConfigurationError(
                f"Listener rule priority {self.priority} is out of range",
                context={"min": low, "max": high},
            )


@dataclass(frozen=True)
class Route53Options:
    domain: str
    zone_id: str
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScheduleOptions:
    schedule: Optional[str] = None
    min_capacity: Optional[int] = None
    max_capacity: Optional[int] = None


@dataclass(frozen=True)
class TurnOnAndOffScheduleOptions:
    disable: bool = False
    off_schedule: Optional[ScheduleOptions] = None
    on_schedule: Optional[ScheduleOptions] = None


@dataclass(frozen=True)
class EcsEc2Options:
    name: str
    cluster_name: str
    auto_scaling_group_name: str
    default_alias: str
    task_definition: pulumi.Input[str]
    desired_count: int
    container_name: str
    container_port: int
    load_balancer_options: Optional[LoadBalancerOptions] = None
    route53_options: Optional[Route53Options] = None
    min_capacity: Optional[int] = None
    max_capacity: Optional[int] = None
    # Non-empty strategies replace the EC2 launch type
    capacity_provider_strategies: Tuple[Mapping[str, Any], ...] = ()
    turn_on_and_off_schedule: Optional[TurnOnAndOffScheduleOptions] = None
    metric_alarms: Optional[Tuple[MetricAlarmRule, ...]] = None
    tags: Dict[str, str] = field(default_factory=dict)


class EcsEc2Lookups(NamedTuple):
    cluster: Any
    auto_scaling_group: Any
    account_id: str
    load_balancer: Optional[Any] = None
    listener: Optional[Any] = None
    zone: Optional[Any] = None


def resolve_schedule(
    window: Optional[ScheduleOptions], defaults: Mapping[str, Any]
) -> Dict[str, Any]:
    """Fill unset fields of a schedule window from the defaults."""
    window = window or ScheduleOptions()
    return {
        key: defaults[key] if getattr(window, key) is None else getattr(window, key)
        for key in ("schedule", "min_capacity", "max_capacity")
    }


class EcsEc2(Component):
    type_name = "EcsEc2"

    def resolve(self, opts: Optional[pulumi.InvokeOptions]) -> EcsEc2Lookups:
        options: EcsEc2Options = self.options
        cluster = get_cluster(options.cluster_name, opts)
        auto_scaling_group = get_autoscaling_group(options.auto_scaling_group_name, opts)

        load_balancer = listener = zone = None
        if options.load_balancer_options is not None:
            load_balancer = get_load_balancer(options.load_balancer_options.name, opts)
            listener = get_listener(load_balancer.arn, LISTENER_PORT, opts)
            if options.route53_options is not None:
                zone = get_zone(options.route53_options.zone_id, opts)

        identity = get_caller_identity(opts)
        return EcsEc2Lookups(
            cluster=cluster,
            auto_scaling_group=auto_scaling_group,
            account_id=identity.account_id,
            load_balancer=load_balancer,
            listener=listener,
            zone=zone,
        )

    def build(self, lookups: EcsEc2Lookups) -> None:
        options: EcsEc2Options = self.options

        self.route53_records = self._declare_records(lookups)

        self.cloudwatch = self.create_child(
            CloudWatch, "cloudwatch", CloudWatchOptions(name=options.name, tags=options.tags)
        )

        self.target_group: Optional[aws.lb.TargetGroup] = None
        self.listener_rule: Optional[aws.lb.ListenerRule] = None
        self.autoscaling_attachment: Optional[aws.autoscaling.Attachment] = None
        if options.load_balancer_options is not None:
            self.target_group = self._declare_target_group(options.load_balancer_options)
            self.listener_rule = self._declare_listener_rule(
                options.load_balancer_options, lookups.listener
            )
            self.autoscaling_attachment = self.declare(
                aws.autoscaling.Attachment,
                "asg-attachment",
                autoscaling_group_name=lookups.auto_scaling_group.id,
                lb_target_group_arn=self.target_group.arn,
            )

        self.service = self._declare_service(lookups.cluster)
        self.app_autoscaling_target = self._declare_autoscaling_target(lookups.account_id)
        self.scaling_policies, self.metric_alarms = self._declare_metric_alarms()
        self.scheduled_actions = self._declare_schedule()

    def _declare_records(self, lookups: EcsEc2Lookups) -> List[aws.route53.Record]:
        if lookups.load_balancer is None or lookups.zone is None:
            return []
        return [
            self.declare(
                aws.route53.Record,
                f"record-{idx}",
                zone_id=lookups.zone.zone_id,
                name=alias,
                type="CNAME",
                ttl=RECORD_TTL,
                records=[lookups.load_balancer.dns_name],
            )
            for idx, alias in enumerate(self.options.route53_options.aliases)
        ]

    def _declare_target_group(self, lb_options: LoadBalancerOptions) -> aws.lb.TargetGroup:
        health_check = None
        if lb_options.health_check_options is not None:
            checks = lb_options.health_check_options
            health_check = {
                key: value
                for key, value in (
                    ("path", checks.path),
                    ("interval", checks.interval),
                    ("timeout", checks.timeout),
                    ("healthy_threshold", checks.healthy_threshold),
                )
                if value is not None
            }
        return self.declare(
            aws.lb.TargetGroup,
            "target-group",
            name=self.options.name,
            vpc_id=lb_options.vpc_id,
            port=TARGET_GROUP_PORT,
            protocol=TARGET_GROUP_PROTOCOL,
            health_check=health_check,
            tags=dict(self.options.tags),
        )

    def _declare_listener_rule(
        self, lb_options: LoadBalancerOptions, listener: Any
    ) -> aws.lb.ListenerRule:
        return self.declare(
            aws.lb.ListenerRule,
            "listener-rule",
            listener_arn=listener.arn,
            priority=lb_options.priority,
            actions=[{"type": "forward", "target_group_arn": self.target_group.arn}],
            conditions=[{"host_header": {"values": [self.options.default_alias]}}],
            tags=dict(self.options.tags),
        )

    def _declare_service(self, cluster: Any) -> aws.ecs.Service:
        options: EcsEc2Options = self.options
        load_balancers = []
        if self.target_group is not None:
            load_balancers.append(
                {
                    "target_group_arn": self.target_group.arn,
                    "container_name": options.container_name,
                    "container_port": options.container_port,
                }
            )
        if options.capacity_provider_strategies:
            logger.debug(
                f"Service {options.name} uses capacity providers instead of EC2 launch type"
            )

        depends_on = [
            resource
            for resource in (
                self.cloudwatch.log_group,
                self.target_group,
                self.listener_rule,
                self.autoscaling_attachment,
            )
            if resource is not None
        ]
        return self.declare(
            aws.ecs.Service,
            "service",
            depends_on=depends_on,
            ignore_changes=SERVICE_IGNORED_CHANGES,
            name=options.name,
            cluster=cluster.id,
            task_definition=options.task_definition,
            desired_count=options.desired_count,
            force_new_deployment=True,
            launch_type=None if options.capacity_provider_strategies else "EC2",
            propagate_tags="SERVICE",
            wait_for_steady_state=False,
            health_check_grace_period_seconds=HEALTH_CHECK_GRACE_PERIOD_SECONDS,
            load_balancers=load_balancers,
            capacity_provider_strategies=[
                dict(strategy) for strategy in options.capacity_provider_strategies
            ]
            or None,
            deployment_circuit_breaker={"enable": True, "rollback": True},
            deployment_controller={"type": "ECS"},
            tags=dict(options.tags),
        )

    def _declare_autoscaling_target(self, account_id: str) -> aws.appautoscaling.Target:
        options: EcsEc2Options = self.options
        min_capacity = options.min_capacity
        max_capacity = options.max_capacity
        return self.declare(
            aws.appautoscaling.Target,
            "ecs-target",
            depends_on=[self.service],
            min_capacity=DEFAULT_MIN_CAPACITY if min_capacity is None else min_capacity,
            max_capacity=DEFAULT_MAX_CAPACITY if max_capacity is None else max_capacity,
            resource_id=f"service/{options.cluster_name}/{options.name}",
            role_arn=AUTOSCALING_SERVICE_LINKED_ROLE.format(account_id=account_id),
            scalable_dimension=SCALABLE_DIMENSION,
            service_namespace=SERVICE_NAMESPACE,
        )

    def _target_scope(self) -> Dict[str, Any]:
        target = self.app_autoscaling_target
        return {
            "resource_id": target.resource_id,
            "scalable_dimension": target.scalable_dimension,
            "service_namespace": target.service_namespace,
        }

    def _declare_metric_alarms(
        self,
    ) -> Tuple[List[aws.appautoscaling.Policy], List[aws.cloudwatch.MetricAlarm]]:
        rules = self.options.metric_alarms
        if rules is None:
            rules = default_metric_alarm_rules()

        policies, alarms = [], []
        # Suffixes keep the rule's catalog position so toggling one rule never renames another
        for idx, rule in enumerate(rules):
            if rule.disable:
                continue
            policy = self._declare_scaling_policy(idx, rule)
            policies.append(policy)
            alarms.append(self._declare_metric_alarm(idx, rule, policy))
        return policies, alarms

    def _declare_scaling_policy(
        self, idx: int, rule: MetricAlarmRule
    ) -> aws.appautoscaling.Policy:
        return self.declare(
            aws.appautoscaling.Policy,
            f"autoscaling-policy-{idx}",
            policy_type="StepScaling",
            name="-".join([self.options.name, rule.metric_name, rule.action]),
            step_scaling_policy_configuration={
                "adjustment_type": "ChangeInCapacity",
                "cooldown": SCALING_POLICY_COOLDOWN,
                "metric_aggregation_type": "Average",
                "step_adjustments": [dict(rule.step_adjustment)],
            },
            **self._target_scope(),
        )

    def _declare_metric_alarm(
        self, idx: int, rule: MetricAlarmRule, policy: aws.appautoscaling.Policy
    ) -> aws.cloudwatch.MetricAlarm:
        options: EcsEc2Options = self.options
        return self.declare(
            aws.cloudwatch.MetricAlarm,
            f"metric-alarm-{idx}",
            name="-".join([options.name, rule.metric_name, rule.action]),
            alarm_description=(
                f"Scale {rule.action} alarm for {options.name} due to {rule.metric_name}"
            ),
            namespace=METRIC_ALARM_NAMESPACE,
            alarm_actions=[policy.arn],
            comparison_operator=rule.comparison_operator,
            threshold=rule.threshold,
            evaluation_periods=1,
            metric_name=rule.metric_name,
            period=rule.period,
            statistic=rule.statistic,
            datapoints_to_alarm=1,
            dimensions={"ServiceName": options.name, "ClusterName": options.cluster_name},
            tags=dict(options.tags),
        )

    def _declare_schedule(self) -> List[aws.appautoscaling.ScheduledAction]:
        schedule = self.options.turn_on_and_off_schedule or TurnOnAndOffScheduleOptions()
        if schedule.disable:
            logger.info(f"Turn on/off schedule disabled for {self.options.name}")
            return []

        actions = []
        for state, window in (("on", schedule.on_schedule), ("off", schedule.off_schedule)):
            resolved = resolve_schedule(window, ECS_SCHEDULE[state])
            actions.append(
                self.declare(
                    aws.appautoscaling.ScheduledAction,
                    f"scheduled-action-{state}",
                    name=f"{self.options.name}-{state}-schedule",
                    schedule=resolved["schedule"],
                    scalable_target_action={
                        "min_capacity": resolved["min_capacity"],
                        "max_capacity": resolved["max_capacity"],
                    },
                    **self._target_scope(),
                )
            )
        return actions

    def outputs(self):
        return {
            "service_name": self.service.name,
            "log_group_arn": self.cloudwatch.log_group.arn,
        }
