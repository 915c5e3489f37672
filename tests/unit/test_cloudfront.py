"""Unit tests for the Cloudfront component."""

import pulumi
from inventory_samples import settled

from rzcomponents.cloudfront import (
    Cloudfront,
    CloudfrontOptions,
    default_cache_behavior,
    error_responses,
    viewer_certificate,
)

CERT_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/abc"


def options(**overrides):
    values = dict(
        origin_id="s3Origin",
        regional_domain_name="site.s3.eu-west-1.amazonaws.com",
        origin_access_identity_path="origin-access-identity/cloudfront/E123",
    )
    values.update(overrides)
    return CloudfrontOptions(**values)


class TestSubConfigs:
    def test_error_responses(self):
        responses = error_responses()
        assert [r["error_code"] for r in responses] == [400, 403, 404, 500]
        assert all(r["response_code"] == 200 for r in responses)
        assert all(r["response_page_path"] == "/index.html" for r in responses)
        assert all(r["error_caching_min_ttl"] == 300 for r in responses)

    def test_certificate_with_arn(self):
        assert viewer_certificate(CERT_ARN) == {
            "acm_certificate_arn": CERT_ARN,
            "cloudfront_default_certificate": False,
            "ssl_support_method": "sni-only",
            "minimum_protocol_version": "TLSv1.2_2021",
        }

    def test_default_certificate(self):
        assert viewer_certificate(None) == {"cloudfront_default_certificate": True}

    def test_no_caching_by_default(self):
        behavior = default_cache_behavior("s3Origin")
        assert (behavior["min_ttl"], behavior["default_ttl"], behavior["max_ttl"]) == (0, 0, 0)
        assert behavior["allowed_methods"] == ["GET", "HEAD"]
        assert behavior["viewer_protocol_policy"] == "redirect-to-https"
        assert behavior["compress"] is True


class TestCloudfront:
    """Tests for the distribution a Cloudfront component declares."""

    @pulumi.runtime.test
    def test_storage_origin_comes_first(self, mocks):
        extra = {"domain_name": "api.example.com", "origin_id": "api"}
        cdn = Cloudfront("cdn", options(origins=(extra,)))

        def check(_):
            origins = mocks.inputs("cdn-distribution")["origins"]
            assert [o["origin_id"] for o in origins] == ["s3Origin", "api"]
            assert origins[0]["s3_origin_config"] == {
                "origin_access_identity": "origin-access-identity/cloudfront/E123"
            }

        return settled(cdn.distribution).apply(check)

    @pulumi.runtime.test
    def test_distribution_settings(self, mocks, graph):
        cdn = Cloudfront(
            "cdn",
            options(aliases=("www.example.com",), certificate_arn=CERT_ARN),
            graph=graph,
        )
        assert graph.node("cdn-distribution").resource_type == "aws.cloudfront.Distribution"

        def check(_):
            props = mocks.inputs("cdn-distribution")
            assert props["enabled"] is True
            assert props["is_ipv6_enabled"] is True
            assert props["default_root_object"] == "index.html"
            assert props["aliases"] == ["www.example.com"]
            assert props["restrictions"] == {"geo_restriction": {"restriction_type": "none"}}
            assert props["viewer_certificate"]["acm_certificate_arn"] == CERT_ARN
            assert props["default_cache_behavior"]["target_origin_id"] == "s3Origin"
            assert [r["error_code"] for r in props["custom_error_responses"]] == [
                400,
                403,
                404,
                500,
            ]

        return settled(cdn.distribution).apply(check)

    @pulumi.runtime.test
    def test_ordered_cache_behaviors_passed_through(self, mocks):
        behavior = {
            "path_pattern": "/assets/*",
            "target_origin_id": "s3Origin",
            "default_ttl": 86400,
        }
        cdn = Cloudfront("cdn", options(ordered_cache_behaviors=(behavior,)))

        def check(_):
            assert mocks.inputs("cdn-distribution")["ordered_cache_behaviors"] == [behavior]

        return settled(cdn.distribution).apply(check)

    @pulumi.runtime.test
    def test_domain_name_output(self, mocks):
        cdn = Cloudfront("cdn", options())

        def check(domain_name):
            assert domain_name == "cdn-distribution.cloudfront.net"

        return cdn.distribution.domain_name.apply(check)
