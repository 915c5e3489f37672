"""Static website: private S3 bucket served through CloudFront.

With ``domain_options`` the distribution uses an ACM certificate that must
already exist for the domain; it is looked up, never created, and a missing
certificate fails the build instead of falling back to the default
certificate. With ``route53_options`` the hosted zone is resolved before
anything is declared (even when ``aliases`` is empty), and one CNAME per alias
is then declared in it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import pulumi
import pulumi_aws as aws

from rzcomponents.bucket import Bucket, BucketOptions
from rzcomponents.cloudfront import Cloudfront, CloudfrontOptions
from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import RECORD_TTL, STATIC_WEBSITE_ORIGIN_ID
from rzcomponents.lookups import get_certificate, get_zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaticWebsiteDomainOptions:
    domain: str
    prevent_adding_wildcard: bool = False


@dataclass(frozen=True)
class StaticWebsiteRoute53Options:
    zone_id: str


@dataclass(frozen=True)
class StaticWebsiteOptions:
    name: str
    aliases: Tuple[str, ...] = ()
    domain_options: Optional[StaticWebsiteDomainOptions] = None
    route53_options: Optional[StaticWebsiteRoute53Options] = None
    tags: Dict[str, str] = field(default_factory=dict)


class StaticWebsiteLookups(NamedTuple):
    certificate: Optional[Any]
    zone: Optional[Any]


def certificate_domain(domain_options: StaticWebsiteDomainOptions) -> str:
    """Domain the certificate is looked up by: '*.<domain>' unless wildcards are prevented."""
    if domain_options.prevent_adding_wildcard:
        return domain_options.domain
    return f"*.{domain_options.domain}"


class StaticWebsite(Component):
    type_name = "StaticWebsite"

    def resolve(self, opts: Optional[pulumi.InvokeOptions]) -> StaticWebsiteLookups:
        options: StaticWebsiteOptions = self.options
        certificate = None
        if options.domain_options is not None:
            certificate = get_certificate(certificate_domain(options.domain_options), opts)
        zone = None
        if options.route53_options is not None:
            zone = get_zone(options.route53_options.zone_id, opts)
        return StaticWebsiteLookups(certificate, zone)

    def build(self, lookups: StaticWebsiteLookups) -> None:
        options: StaticWebsiteOptions = self.options

        self.storage = self.create_child(
            Bucket,
            "storage",
            BucketOptions(
                bucket_name=options.name, create_origin_access_identity=True, tags=options.tags
            ),
        )
        self.cdn = self.create_child(
            Cloudfront,
            "cdn",
            CloudfrontOptions(
                origin_id=STATIC_WEBSITE_ORIGIN_ID,
                regional_domain_name=self.storage.bucket.bucket_regional_domain_name,
                origin_access_identity_path=self.storage.oai.cloudfront_access_identity_path,
                aliases=options.aliases,
                certificate_arn=lookups.certificate.arn if lookups.certificate else None,
                tags=options.tags,
            ),
        )

        self.route53_records: List[aws.route53.Record] = []
        if lookups.zone is not None:
            logger.debug(f"Pointing {len(options.aliases)} aliases at {self.cdn.name}")
            self.route53_records = [
                self.declare(
                    aws.route53.Record,
                    f"record-{idx}",
                    zone_id=lookups.zone.zone_id,
                    name=alias,
                    type="CNAME",
                    ttl=RECORD_TTL,
                    records=[self.cdn.distribution.domain_name],
                )
                for idx, alias in enumerate(options.aliases)
            ]

    def outputs(self):
        return {
            "bucket_name": self.storage.bucket.id,
            "domain_name": self.cdn.distribution.domain_name,
        }
