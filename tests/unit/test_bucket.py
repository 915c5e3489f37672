"""Unit tests for the Bucket component."""

import json

import pulumi
from inventory_samples import settled

from rzcomponents.bucket import Bucket, BucketOptions, server_side_encryption_configuration


def statements_of(mocks, name="site-bucket-policy"):
    return json.loads(mocks.inputs(name)["policy"])["Statement"]


class TestServerSideEncryption:
    def test_enabled(self):
        config = server_side_encryption_configuration(False)
        rule = config["rule"]["apply_server_side_encryption_by_default"]
        assert rule["sse_algorithm"] == "AES256"

    def test_disabled(self):
        assert server_side_encryption_configuration(True) is None


class TestBucket:
    """Tests for the resources a Bucket declares."""

    @pulumi.runtime.test
    def test_defaults(self, mocks, graph):
        bucket = Bucket("site", BucketOptions("site-bucket"), graph=graph)
        assert bucket.oai is None
        assert [n.name for n in graph.owned_by("site")] == [
            "site-bucket",
            "site-bucket-policy",
            "site-public-access-block",
        ]

        def check(_):
            inputs = mocks.inputs("site-bucket")
            assert mocks.type_of("site-bucket") == "aws:s3/bucket:Bucket"
            assert inputs["bucket"] == "site-bucket"
            assert inputs["force_destroy"] is True
            rule = inputs["server_side_encryption_configuration"]["rule"]
            assert rule["apply_server_side_encryption_by_default"]["sse_algorithm"] == "AES256"

        return settled(bucket.bucket, bucket.bucket_policy).apply(check)

    @pulumi.runtime.test
    def test_encryption_disabled(self, mocks):
        options = BucketOptions("site-bucket", disable_server_side_encryption=True)
        bucket = Bucket("site", options)

        def check(_):
            assert "server_side_encryption_configuration" not in mocks.inputs("site-bucket")

        return settled(bucket.bucket).apply(check)

    @pulumi.runtime.test
    def test_ssl_only_statement(self, mocks):
        bucket = Bucket("site", BucketOptions("site-bucket"))

        def check(_):
            assert statements_of(mocks) == [
                {
                    "Sid": "AllowSSLRequestsOnly",
                    "Effect": "Deny",
                    "Action": "s3:*",
                    "Resource": ["arn:aws:mock:::site-bucket", "arn:aws:mock:::site-bucket/*"],
                    "Principal": "*",
                    "Condition": {"Bool": {"aws:SecureTransport": ["false"]}},
                }
            ]
            assert mocks.inputs("site-bucket-policy")["bucket"] == "site-bucket-id"

        return settled(bucket.bucket_policy).apply(check)

    @pulumi.runtime.test
    def test_origin_access_identity(self, mocks):
        options = BucketOptions("site-bucket", create_origin_access_identity=True)
        bucket = Bucket("site", options)

        def check(_):
            assert mocks.inputs("site-oai") == {"comment": "site-bucket"}
            statements = statements_of(mocks)
            assert [s["Sid"] for s in statements] == [
                "CloudfrontOriginAccessIdentity",
                "AllowSSLRequestsOnly",
            ]
            assert statements[0]["Action"] == "s3:GetObject"
            assert statements[0]["Resource"] == "arn:aws:mock:::site-bucket/*"
            assert statements[0]["Principal"]["AWS"].endswith("Origin Access Identity site-oai")

        return settled(bucket.oai, bucket.bucket_policy).apply(check)

    @pulumi.runtime.test
    def test_policy_declared_without_statements(self, mocks):
        options = BucketOptions("site-bucket", disable_ssl_requests_only=True)
        bucket = Bucket("site", options)

        def check(_):
            document = json.loads(mocks.inputs("site-bucket-policy")["policy"])
            assert document == {"Version": "2012-10-17", "Statement": []}

        return settled(bucket.bucket_policy).apply(check)

    @pulumi.runtime.test
    def test_public_access_block(self, mocks):
        bucket = Bucket("site", BucketOptions("site-bucket"))

        def check(_):
            flags = dict(mocks.inputs("site-public-access-block"))
            assert flags.pop("bucket") == "site-bucket-id"
            assert flags == {
                "block_public_acls": True,
                "block_public_policy": True,
                "ignore_public_acls": True,
                "restrict_public_buckets": True,
            }

        return settled(bucket.public_access_block).apply(check)

    @pulumi.runtime.test
    def test_public_access_block_disabled(self, mocks, graph):
        options = BucketOptions("site-bucket", disable_public_access_block=True)
        bucket = Bucket("site", options, graph=graph)
        assert bucket.public_access_block is None
        assert graph.nodes_of_type("aws.s3.BucketPublicAccessBlock") == []

        def check(_):
            assert "site-public-access-block" not in mocks.names()

        return settled(bucket.bucket, bucket.bucket_policy).apply(check)

    @pulumi.runtime.test
    def test_children_parented_to_component(self, mocks, graph):
        bucket = Bucket("site", BucketOptions("site-bucket"), graph=graph)
        assert {n.owner for n in graph.nodes} == {"site"}
        assert graph.components[0].type_token == "rzdevelop:components:Bucket"

        def check(urns):
            component_urn, bucket_urn = urns
            assert component_urn.endswith("rzdevelop:components:Bucket::site")
            assert "rzdevelop:components:Bucket$aws:s3/bucket:Bucket::site-bucket" in bucket_urn

        return pulumi.Output.all(bucket.urn, bucket.bucket.urn).apply(check)
