"""Unit tests for parameter manager conventions."""

import pytest

from docindex_common.dynamo_gateway import DynamoGateway
from docindex_common.parameters import (
    build_parameter_item,
    normalize_short_name,
    parameter_scope,
    parameters_table_name,
    put_parameter,
    query_parameters,
)


@pytest.fixture
def gateway(aws_session, parameters_table):
    return DynamoGateway(session=aws_session)


class TestNaming:
    def test_table_name(self):
        assert parameters_table_name("dev") == "usrv-parameters-manager-dev-parameters"

    def test_unknown_environment(self):
        with pytest.raises(ValueError, match="staging"):
            parameters_table_name("staging")

    def test_scope(self):
        assert parameter_scope("qa", "acct", "usrv-card") == "/qa/acct/usrv-card"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("timeout_tables", "TIMEOUT_TABLES"),
            ("timeout-tables", "TIMEOUT_TABLES"),
            ("max retries.v2", "MAX_RETRIES_V2"),
            ("ALREADY_OK", "ALREADY_OK"),
        ],
    )
    def test_normalize_short_name(self, raw, expected):
        assert normalize_short_name(raw) == expected


class TestBuildParameterItem:
    def test_full_item(self):
        item = build_parameter_item(
            "dev", "acct", "usrv-card", "timeout-tables", "us-east-1", value="30", timestamp=1700000000
        )

        assert item == {
            "name": "usrv-card-TIMEOUT_TABLES",
            "scope": "/dev/acct/usrv-card",
            "awsAccount": "acct",
            "config": {"region": "us-east-1"},
            "createdAt": 1700000000,
            "description": "",
            "lambdas": "'ALL'",
            "shortName": "TIMEOUT_TABLES",
            "stage": "dev",
            "updatedAt": 1700000000,
            "updatedBy": "docindex-mcp",
            "value": "30",
            "values": "",
        }

    def test_timestamps_default_to_now(self):
        item = build_parameter_item("dev", "acct", "usrv-card", "x", "us-east-1")
        assert item["createdAt"] == item["updatedAt"]
        assert item["createdAt"] > 1700000000


class TestPersistence:
    def test_put_then_query_by_scope(self, gateway):
        put_parameter(
            gateway, "dev", build_parameter_item("dev", "acct", "usrv-card", "a", "us-east-1", value="1")
        )
        put_parameter(
            gateway, "dev", build_parameter_item("dev", "acct", "usrv-card", "b", "us-east-1", value="2")
        )
        put_parameter(
            gateway, "dev", build_parameter_item("dev", "acct", "usrv-other", "c", "us-east-1")
        )

        page = query_parameters(gateway, "dev", "acct", "usrv-card")

        assert page["count"] == 2
        assert sorted(item["shortName"] for item in page["items"]) == ["A", "B"]

    def test_put_replaces_existing(self, gateway):
        put_parameter(gateway, "dev", build_parameter_item("dev", "acct", "usrv-card", "a", "us-east-1", value="1"))
        put_parameter(gateway, "dev", build_parameter_item("dev", "acct", "usrv-card", "a", "us-east-1", value="9"))

        item = gateway.get_item(parameters_table_name("dev"), {"name": "usrv-card-A"})

        assert item["value"] == "9"

    def test_put_rejects_unknown_environment(self, gateway):
        with pytest.raises(ValueError):
            put_parameter(gateway, "staging", {"name": "x"})
