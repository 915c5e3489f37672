"""CloudWatch log group with a retention policy."""

from dataclasses import dataclass, field
from typing import Dict, Optional

import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import LOG_RETENTION_DAYS
from rzcomponents.exceptions import ConfigurationError


@dataclass(frozen=True)
class CloudWatchOptions:
    name: str
    # None keeps events forever
    retention_in_days: Optional[int] = None
    tags: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.retention_in_days is not None and self.retention_in_days not in LOG_RETENTION_DAYS:
            raise ConfigurationError(
                f"Unsupported log retention of {self.retention_in_days} days",
                context={"allowed": ", ".join(str(d) for d in sorted(LOG_RETENTION_DAYS))},
            )


class CloudWatch(Component):
    type_name = "CloudWatch"

    def build(self, lookups) -> None:
        options: CloudWatchOptions = self.options
        self.log_group = self.declare(
            aws.cloudwatch.LogGroup,
            "log-group",
            name=options.name,
            retention_in_days=options.retention_in_days,
            tags=dict(options.tags),
        )

    def outputs(self):
        return {"log_group_arn": self.log_group.arn}
