"""Shared fixtures for the unit tests."""

import boto3
import pytest
from moto import mock_aws

from docindex_common.parameters import parameters_table_name


@pytest.fixture
def aws_session():
    """boto3 session backed by moto for the duration of one test."""
    with mock_aws():
        yield boto3.Session(region_name="us-east-1")


@pytest.fixture
def parameters_table(aws_session):
    """Create the dev parameters table with its scope GSI."""
    table_name = parameters_table_name("dev")
    aws_session.client("dynamodb").create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "name", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "name", "AttributeType": "S"},
            {"AttributeName": "scope", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "scopeIndex",
                "KeySchema": [{"AttributeName": "scope", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    return table_name
