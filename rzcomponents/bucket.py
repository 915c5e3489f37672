"""S3 bucket with secure defaults.

Declares, in order:

1. a CloudFront origin access identity, when ``create_origin_access_identity``
2. the bucket (force-destroy, AES256 encryption unless disabled)
3. a bucket policy built from the statements that apply: read access for the
   origin access identity, and a deny on non-TLS requests unless
   ``disable_ssl_requests_only``; the policy is declared even when no
   statement applies
4. a public access block with all four flags, unless ``disable_public_access_block``
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pulumi
import pulumi_aws as aws

from rzcomponents.component import Component
from rzcomponents.config.aws_defaults import SSE_ALGORITHM
from rzcomponents.policy import PolicyCondition, PolicyPrincipal, PolicyStatement, policy_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketOptions:
    bucket_name: str
    disable_server_side_encryption: bool = False
    disable_ssl_requests_only: bool = False
    create_origin_access_identity: bool = False
    disable_public_access_block: bool = False
    tags: Dict[str, str] = field(default_factory=dict)


def server_side_encryption_configuration(disabled: bool) -> Optional[Dict[str, Any]]:
    if disabled:
        return None
    return {"rule": {"apply_server_side_encryption_by_default": {"sse_algorithm": SSE_ALGORITHM}}}


class Bucket(Component):
    type_name = "Bucket"

    def build(self, lookups) -> None:
        options: BucketOptions = self.options

        self.oai: Optional[aws.cloudfront.OriginAccessIdentity] = None
        if options.create_origin_access_identity:
            self.oai = self.declare(
                aws.cloudfront.OriginAccessIdentity, "oai", comment=options.bucket_name
            )

        self.bucket = self.declare(
            aws.s3.Bucket,
            "bucket",
            bucket=options.bucket_name,
            force_destroy=True,
            server_side_encryption_configuration=server_side_encryption_configuration(
                options.disable_server_side_encryption
            ),
            tags=dict(options.tags),
        )

        self.bucket_policy = self.declare(
            aws.s3.BucketPolicy,
            "bucket-policy",
            bucket=self.bucket.id,
            policy=policy_document(self.policy_statements(), self.invoke_opts()),
        )

        self.public_access_block: Optional[aws.s3.BucketPublicAccessBlock] = None
        if options.disable_public_access_block:
            logger.warning(f"Public access block disabled for bucket {options.bucket_name}")
        else:
            self.public_access_block = self.declare(
                aws.s3.BucketPublicAccessBlock,
                "public-access-block",
                bucket=self.bucket.id,
                block_public_acls=True,
                block_public_policy=True,
                ignore_public_acls=True,
                restrict_public_buckets=True,
            )

    def policy_statements(self) -> List[PolicyStatement]:
        statements = []
        if self.oai is not None:
            statements.append(self._oai_read_statement())
        if not self.options.disable_ssl_requests_only:
            statements.append(self._ssl_requests_only_statement())
        return statements

    def _oai_read_statement(self) -> PolicyStatement:
        return PolicyStatement(
            sid="CloudfrontOriginAccessIdentity",
            actions=("s3:GetObject",),
            resources=(pulumi.Output.concat(self.bucket.arn, "/*"),),
            principals=(PolicyPrincipal("AWS", (self.oai.iam_arn,)),),
        )

    def _ssl_requests_only_statement(self) -> PolicyStatement:
        return PolicyStatement(
            sid="AllowSSLRequestsOnly",
            effect="Deny",
            actions=("s3:*",),
            resources=(self.bucket.arn, pulumi.Output.concat(self.bucket.arn, "/*")),
            principals=(PolicyPrincipal("*", ("*",)),),
            conditions=(PolicyCondition("Bool", "aws:SecureTransport", ("false",)),),
        )

    def outputs(self):
        return {"bucket_arn": self.bucket.arn, "bucket_id": self.bucket.id}
