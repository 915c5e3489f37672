"""Integration tests building a full environment in one Pulumi program.

A static website, a database, a task role and an ECS service are declared
against the sample inventory under Pulumi mocks, then the declaration log is
validated, ordered and exported the way a caller would before ``pulumi up``.
"""

import json

import pulumi
import pytest
from inventory_samples import ASG_NAME, ZONE_ID, settled, use_mocks

from rzcomponents import (
    EcsEc2,
    EcsEc2Options,
    EcsTaskRole,
    EcsTaskRoleOptions,
    LoadBalancerOptions,
    RdsDatabase,
    RdsDatabaseOptions,
    ResourceGraph,
    Route53Options,
    StaticWebsite,
    StaticWebsiteDomainOptions,
    StaticWebsiteOptions,
    StaticWebsiteRoute53Options,
    compute_naming,
)
from rzcomponents.exceptions import ExternalLookupError
from rzcomponents.helpers import export_graph
from rzcomponents.lookups import ACM_CERTIFICATE

NAMING = compute_naming("development", "shop", "web")


def build_site(graph):
    return StaticWebsite(
        "site",
        StaticWebsiteOptions(
            name=NAMING.full_name,
            aliases=("shop.example.com",),
            domain_options=StaticWebsiteDomainOptions("example.com"),
            route53_options=StaticWebsiteRoute53Options(ZONE_ID),
            tags=NAMING.default_tags,
        ),
        graph=graph,
    )


def build_database(graph):
    return RdsDatabase(
        "db",
        RdsDatabaseOptions(
            name=f"{NAMING.full_name}-db",
            db_name="shop",
            username="shop",
            password=pulumi.Output.secret("secret"),
            tags=NAMING.default_tags,
        ),
        graph=graph,
    )


def build_service(graph, cluster_name="main"):
    return EcsEc2(
        "api",
        EcsEc2Options(
            name=f"{NAMING.full_name}-api",
            cluster_name=cluster_name,
            auto_scaling_group_name=ASG_NAME,
            default_alias="api.shop.example.com",
            task_definition="shop-api:1",
            desired_count=1,
            container_name="api",
            container_port=8080,
            load_balancer_options=LoadBalancerOptions("public", "vpc-123", 100),
            route53_options=Route53Options(
                "example.com", ZONE_ID, aliases=("api.shop.example.com",)
            ),
            tags=NAMING.default_tags,
        ),
        graph=graph,
    )


@pytest.fixture
def no_certificate():
    return use_mocks(exclude=(ACM_CERTIFICATE,))


class TestFullTopology:
    """End-to-end declaration of several components into a shared log."""

    @pulumi.runtime.test
    def test_all_components_build(self, mocks, tmp_path):
        graph = ResourceGraph()
        site = build_site(graph)
        database = build_database(graph)
        role = EcsTaskRole("role", EcsTaskRoleOptions(NAMING.full_name), graph=graph)
        service = build_service(graph)

        roots = [c.name for c in graph.components if c.parent is None]
        assert roots == ["site", "db", "role", "api"]
        graph.validate()

        data = export_graph(graph, str(tmp_path / "graph.json"))
        with open(tmp_path / "graph.json") as file:
            assert json.load(file)["creation_order"] == data["creation_order"]
        order = data["creation_order"]
        assert order.index("api-asg-attachment") < order.index("api-service")
        assert order.index("api-service") < order.index("api-ecs-target")

        def check(_):
            assert mocks.inputs("site-record-0")["records"] == [
                "site-cdn-distribution.cloudfront.net"
            ]
            assert mocks.inputs("db-rds-instance")["identifier"] == "development-shop-web-db"
            assert mocks.inputs("api-service")["tags"] == NAMING.default_tags

        return settled(
            site.cdn.distribution,
            *site.route53_records,
            database.rds.instance,
            role.role,
            service.service,
        ).apply(check)

    @pulumi.runtime.test
    def test_failed_component_does_not_affect_siblings(self, mocks):
        graph = ResourceGraph()
        site = build_site(graph)
        with pytest.raises(ExternalLookupError):
            build_service(graph, cluster_name="missing")
        database = build_database(graph)

        assert [c.name for c in graph.components if c.name.startswith("api")] == []
        assert graph.nodes_of_type("aws.cloudfront.Distribution")
        assert graph.nodes_of_type("aws.rds.Instance")
        graph.validate()

        def check(_):
            assert mocks.names("api") == []

        return settled(site.cdn.distribution, database.rds.instance).apply(check)

    @pulumi.runtime.test
    def test_missing_certificate_fails_only_the_site(self, no_certificate):
        graph = ResourceGraph()
        with pytest.raises(ExternalLookupError) as excinfo:
            build_site(graph)
        assert excinfo.value.context["kind"] == ACM_CERTIFICATE
        service = build_service(graph)
        assert [c.name for c in graph.components] == ["api", "api-cloudwatch"]
        return settled(service.service)
