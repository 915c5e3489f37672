# AWS defaults for rzcomponents
# Provider: Amazon Web Services (pulumi_aws)
# Tables here are read-only; components expand them into resource arguments.

from types import MappingProxyType

# Component type tokens are "<TYPE_PREFIX>:<ComponentName>"
TYPE_PREFIX = "rzdevelop:components"

# Naming
DESCRIPTION_TEMPLATE = "Resource made with Pulumi for {full_name}"

# Network
OPEN_CIDR_BLOCKS = ("0.0.0.0/0",)
POSTGRES_PORT = 5432

# S3
SSE_ALGORITHM = "AES256"

# CloudWatch Logs accepts only these retention periods (0 = never expire)
LOG_RETENTION_DAYS = frozenset(
    {0, 1, 3, 5, 7, 14, 30, 60, 90, 120, 150, 180, 365, 400, 545, 731, 1827, 3653}
)

# IAM
POLICY_VERSION = "2012-10-17"
ECS_TASKS_SERVICE_PRINCIPAL = "ecs-tasks.amazonaws.com"

# RDS instance defaults; not suitable for production (no HA, no backups)
RDS_DEFAULTS = MappingProxyType(
    {
        "engine": "postgres",
        "engine_version": "12.7",
        "parameter_group_name": "default.postgres12",
        "instance_class": "db.t2.micro",
        "storage_type": "gp2",
        "allocated_storage": 20,
        "max_allocated_storage": 21,
    }
)

# CloudFront single-page-application fallback
CLOUDFRONT_ERROR_CODES = (400, 403, 404, 500)
CLOUDFRONT_ERROR_RESPONSE = MappingProxyType(
    {
        "error_caching_min_ttl": 300,
        "response_code": 200,
        "response_page_path": "/index.html",
    }
)
CLOUDFRONT_MINIMUM_PROTOCOL_VERSION = "TLSv1.2_2021"
CLOUDFRONT_CACHED_METHODS = ("GET", "HEAD")
STATIC_WEBSITE_ORIGIN_ID = "s3Origin"

# Route53
RECORD_TTL = 5

# ECS on EC2
LISTENER_PORT = 443
TARGET_GROUP_PORT = 80
TARGET_GROUP_PROTOCOL = "HTTP"
LISTENER_RULE_PRIORITY_RANGE = (1, 50000)
HEALTH_CHECK_GRACE_PERIOD_SECONDS = 60
DEFAULT_MIN_CAPACITY = 1
DEFAULT_MAX_CAPACITY = 2
SCALABLE_DIMENSION = "ecs:service:DesiredCount"
SERVICE_NAMESPACE = "ecs"
# Scaling actions own desiredCount once the service exists
SERVICE_IGNORED_CHANGES = ("desiredCount",)
SCALING_POLICY_COOLDOWN = 60
METRIC_ALARM_NAMESPACE = "AWS/ECS"
AUTOSCALING_SERVICE_LINKED_ROLE = (
    "arn:aws:iam::{account_id}:role/aws-service-role/"
    "ecs.application-autoscaling.amazonaws.com/"
    "AWSServiceRoleForApplicationAutoScaling_ECSService"
)

# Step-scaling rules; one (policy, alarm) pair per enabled rule
ECS_METRIC_ALARMS = (
    MappingProxyType(
        {
            "action": "down",
            "comparison_operator": "LessThanThreshold",
            "threshold": 40,
            "metric_name": "CPUUtilization",
            "period": 300,
            "statistic": "Average",
            "step_adjustment": MappingProxyType(
                {"scaling_adjustment": -1, "metric_interval_upper_bound": "0"}
            ),
            "disable": False,
        }
    ),
    MappingProxyType(
        {
            "action": "up",
            "comparison_operator": "GreaterThanOrEqualToThreshold",
            "threshold": 70,
            "metric_name": "CPUUtilization",
            "period": 60,
            "statistic": "Average",
            "step_adjustment": MappingProxyType(
                {"scaling_adjustment": 1, "metric_interval_lower_bound": "1"}
            ),
            "disable": False,
        }
    ),
    MappingProxyType(
        {
            "action": "down",
            "comparison_operator": "LessThanThreshold",
            "threshold": 40,
            "metric_name": "MemoryUtilization",
            "period": 300,
            "statistic": "Average",
            "step_adjustment": MappingProxyType(
                {"scaling_adjustment": -1, "metric_interval_upper_bound": "0"}
            ),
            "disable": True,
        }
    ),
    MappingProxyType(
        {
            "action": "up",
            "comparison_operator": "GreaterThanOrEqualToThreshold",
            "threshold": 70,
            "metric_name": "MemoryUtilization",
            "period": 60,
            "statistic": "Average",
            "step_adjustment": MappingProxyType(
                {"scaling_adjustment": 1, "metric_interval_lower_bound": "1"}
            ),
            "disable": True,
        }
    ),
)

# Scale to zero outside business hours (times in UTC)
ECS_SCHEDULE = MappingProxyType(
    {
        "on": MappingProxyType(
            {"schedule": "cron(0 14 * * ? *)", "min_capacity": 1, "max_capacity": 2}
        ),
        "off": MappingProxyType(
            {"schedule": "cron(30 7 * * ? *)", "min_capacity": 0, "max_capacity": 0}
        ),
    }
)
