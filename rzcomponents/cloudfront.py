"""CloudFront distribution in front of an S3 origin.

Caching is off by default (zero TTLs on the default behaviour); callers opt in
through ``ordered_cache_behaviors``. Error responses fall back to
``/index.html`` with HTTP 200 so single-page applications can route.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pulumi
import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import (
    CLOUDFRONT_CACHED_METHODS,
    CLOUDFRONT_ERROR_CODES,
    CLOUDFRONT_ERROR_RESPONSE,
    CLOUDFRONT_MINIMUM_PROTOCOL_VERSION,
)


@dataclass(frozen=True)
class CloudfrontOptions:
    origin_id: str
    regional_domain_name: pulumi.Input[str]
    origin_access_identity_path: pulumi.Input[str]
    aliases: Tuple[str, ...] = ()
    certificate_arn: Optional[str] = None
    origins: Tuple[Mapping[str, Any], ...] = ()
    ordered_cache_behaviors: Tuple[Mapping[str, Any], ...] = ()
    tags: Dict[str, str] = field(default_factory=dict)


def s3_origin(
    regional_domain_name: pulumi.Input[str],
    origin_id: str,
    origin_access_identity_path: pulumi.Input[str],
) -> Dict[str, Any]:
    return {
        "domain_name": regional_domain_name,
        "origin_id": origin_id,
        "s3_origin_config": {"origin_access_identity": origin_access_identity_path},
    }


def error_responses(error_codes=CLOUDFRONT_ERROR_CODES) -> List[Dict[str, Any]]:
    return [{"error_code": code, **CLOUDFRONT_ERROR_RESPONSE} for code in error_codes]


def viewer_certificate(certificate_arn: Optional[str]) -> Dict[str, Any]:
    if certificate_arn:
        return {
            "acm_certificate_arn": certificate_arn,
            "cloudfront_default_certificate": False,
            "ssl_support_method": "sni-only",
            "minimum_protocol_version": CLOUDFRONT_MINIMUM_PROTOCOL_VERSION,
        }
    return {"cloudfront_default_certificate": True}


def default_cache_behavior(origin_id: str) -> Dict[str, Any]:
    return {
        "target_origin_id": origin_id,
        "viewer_protocol_policy": "redirect-to-https",
        "allowed_methods": list(CLOUDFRONT_CACHED_METHODS),
        "cached_methods": list(CLOUDFRONT_CACHED_METHODS),
        "forwarded_values": {"query_string": False, "cookies": {"forward": "none"}},
        "min_ttl": 0,
        "max_ttl": 0,
        "default_ttl": 0,
        "compress": True,
    }


class Cloudfront(Component):
    type_name = "Cloudfront"

    def build(self, lookups) -> None:
        options: CloudfrontOptions = self.options
        origins = [
            s3_origin(
                options.regional_domain_name,
                options.origin_id,
                options.origin_access_identity_path,
            ),
            *(dict(origin) for origin in options.origins),
        ]
        self.distribution = self.declare(
            aws.cloudfront.Distribution,
            "distribution",
            enabled=True,
            is_ipv6_enabled=True,
            wait_for_deployment=True,
            default_root_object="index.html",
            ordered_cache_behaviors=[dict(b) for b in options.ordered_cache_behaviors],
            aliases=list(options.aliases),
            origins=origins,
            restrictions={"geo_restriction": {"restriction_type": "none"}},
            viewer_certificate=viewer_certificate(options.certificate_arn),
            default_cache_behavior=default_cache_behavior(options.origin_id),
            custom_error_responses=error_responses(),
            tags=dict(options.tags),
        )

    def outputs(self):
        return {"domain_name": self.distribution.domain_name}
