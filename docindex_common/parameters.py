"""Parameter manager conventions.

Parameters live in one DynamoDB table per environment
(``usrv-parameters-manager-{env}-parameters``). Each item belongs to a scope
``/{env}/{awsAccount}/{usrv}`` which is indexed by the ``scopeIndex`` GSI.

Parameter item schema:
{
    "name": "usrv-card-TIMEOUT_TABLES",  # Partition key
    "scope": "/dev/my-account/usrv-card",
    "shortName": "TIMEOUT_TABLES",
    "awsAccount": "my-account",
    "stage": "dev",
    "config": {"region": "us-east-1"},
    "value": "30",
    "values": "",
    "description": "",
    "lambdas": "'ALL'",
    "createdAt": 1700000000,          # Epoch seconds
    "updatedAt": 1700000000,
    "updatedBy": "docindex-mcp"
}
"""

import logging
import re
import time
from typing import Any

from docindex_common.constants import (
    DEFAULT_PARAMETER_LAMBDAS,
    PARAMETER_ENVIRONMENTS,
    PARAMETER_SCOPE_INDEX,
    PARAMETER_UPDATED_BY,
)
from docindex_common.dynamo_gateway import DynamoGateway

logger = logging.getLogger(__name__)

_INVALID_SHORT_NAME_CHARS = re.compile(r"[^A-Z0-9]")


def parameters_table_name(environment: str) -> str:
    """
    Table holding the parameters of one environment.

    Raises:
        ValueError: If the environment is not qa, dev or prod
    """
    if environment not in PARAMETER_ENVIRONMENTS:
        raise ValueError(
            f"Unknown environment {environment!r}; expected one of {', '.join(PARAMETER_ENVIRONMENTS)}"
        )
    return f"usrv-parameters-manager-{environment}-parameters"


def parameter_scope(environment: str, profile: str, usrv_name: str) -> str:
    return f"/{environment}/{profile}/{usrv_name}"


def normalize_short_name(short_name: str) -> str:
    """UPPER_SNAKE_CASE: upper-case, every non-alphanumeric becomes "_"."""
    return _INVALID_SHORT_NAME_CHARS.sub("_", short_name.upper())


def build_parameter_item(
    environment: str,
    profile: str,
    usrv_name: str,
    short_name: str,
    region: str,
    value: str | None = None,
    values: str | None = None,
    description: str | None = None,
    lambdas: str | None = None,
    timestamp: int | None = None,
) -> dict[str, Any]:
    """Build a full parameter item; created and updated times are the same."""
    now = int(time.time()) if timestamp is None else timestamp
    normalized = normalize_short_name(short_name)
    return {
        "name": f"{usrv_name}-{normalized}",
        "scope": parameter_scope(environment, profile, usrv_name),
        "awsAccount": profile,
        "config": {"region": region},
        "createdAt": now,
        "description": description or "",
        "lambdas": lambdas or DEFAULT_PARAMETER_LAMBDAS,
        "shortName": normalized,
        "stage": environment,
        "updatedAt": now,
        "updatedBy": PARAMETER_UPDATED_BY,
        "value": value or "",
        "values": values or "",
    }


def put_parameter(gateway: DynamoGateway, environment: str, item: dict[str, Any]) -> dict[str, Any]:
    """Write (create or replace) a parameter item."""
    table_name = parameters_table_name(environment)
    gateway.put_item(table_name, item)
    logger.info(f"Saved parameter {item['name']} in {table_name}")
    return item


def query_parameters(
    gateway: DynamoGateway,
    environment: str,
    profile: str,
    usrv_name: str,
) -> dict[str, Any]:
    """All parameters of a microservice scope, via the scope GSI."""
    return gateway.query(
        parameters_table_name(environment),
        "#scope = :scope",
        index_name=PARAMETER_SCOPE_INDEX,
        expression_attribute_names={"#scope": "scope"},
        expression_attribute_values={":scope": parameter_scope(environment, profile, usrv_name)},
    )
