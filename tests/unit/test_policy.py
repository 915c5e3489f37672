"""Unit tests for IAM policy statements and document assembly."""

import json

import pulumi
import pytest

from rzcomponents.exceptions import ConfigurationError
from rzcomponents.policy import (
    PolicyCondition,
    PolicyPrincipal,
    PolicyStatement,
    policy_document,
    statement_args,
)

BUCKET_ARN = "arn:aws:s3:::site-bucket"


class TestPolicyDocument:
    """Tests for policy_document()."""

    @pulumi.runtime.test
    def test_empty_statement_list(self, mocks):
        def check(document):
            assert json.loads(document) == {"Version": "2012-10-17", "Statement": []}

        return policy_document([]).apply(check)

    @pulumi.runtime.test
    def test_statements_keep_their_order(self, mocks):
        first = PolicyStatement(actions=("s3:GetObject",), sid="First")
        second = PolicyStatement(actions=("s3:*",), effect="Deny", sid="Second")

        def check(document):
            assert [s["Sid"] for s in json.loads(document)["Statement"]] == ["First", "Second"]

        return policy_document([first, second]).apply(check)

    @pulumi.runtime.test
    def test_outputs_resolve_inside_document(self, mocks):
        arn = pulumi.Output.from_input(BUCKET_ARN)
        statement = PolicyStatement(
            actions=("s3:GetObject",), resources=(pulumi.Output.concat(arn, "/*"),)
        )

        def check(document):
            assert json.loads(document)["Statement"][0]["Resource"] == f"{BUCKET_ARN}/*"

        return policy_document([statement]).apply(check)

    def test_malformed_statement_fails_whole_document(self):
        good = PolicyStatement(actions=("s3:GetObject",))
        bad = PolicyStatement(actions=(), sid="Broken")
        with pytest.raises(ConfigurationError) as excinfo:
            policy_document([good, bad])
        assert excinfo.value.context["sid"] == "Broken"


class TestStatementArgs:
    """Tests for statement_args()."""

    def test_minimal_statement(self):
        assert statement_args(PolicyStatement(actions=("sts:AssumeRole",))) == {
            "effect": "Allow",
            "actions": ["sts:AssumeRole"],
        }

    def test_full_statement(self):
        statement = PolicyStatement(
            actions=("s3:*",),
            resources=(BUCKET_ARN,),
            principals=(PolicyPrincipal("*", ("*",)),),
            conditions=(PolicyCondition("Bool", "aws:SecureTransport", ("false",)),),
            effect="Deny",
            sid="AllowSSLRequestsOnly",
        )
        assert statement_args(statement) == {
            "effect": "Deny",
            "actions": ["s3:*"],
            "sid": "AllowSSLRequestsOnly",
            "resources": [BUCKET_ARN],
            "principals": [{"type": "*", "identifiers": ["*"]}],
            "conditions": [
                {"test": "Bool", "variable": "aws:SecureTransport", "values": ["false"]}
            ],
        }

    def test_invalid_effect(self):
        with pytest.raises(ConfigurationError) as excinfo:
            statement_args(PolicyStatement(actions=("s3:*",), effect="Maybe"))
        assert excinfo.value.context["allowed"] == "Allow/Deny"

    def test_principal_without_identifiers(self):
        statement = PolicyStatement(actions=("s3:*",), principals=(PolicyPrincipal("AWS", ()),))
        with pytest.raises(ConfigurationError) as excinfo:
            statement_args(statement)
        assert excinfo.value.context["type"] == "AWS"
