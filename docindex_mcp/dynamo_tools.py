"""DynamoDB tools: item lookup, parameter management, scans and table listing.

Every call names the AWS credentials profile and region to use; a gateway is
built per call.
"""

import logging
from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import Field

from docindex_common.constants import DEFAULT_PARAMETER_LAMBDAS
from docindex_common.dynamo_gateway import DynamoGateway, to_json
from docindex_common.parameters import (
    build_parameter_item,
    parameter_scope,
    parameters_table_name,
    put_parameter,
    query_parameters,
)

logger = logging.getLogger(__name__)

Environment = Literal["qa", "dev", "prod"]
GatewayFactory = Callable[[str, str], DynamoGateway]

PROFILE_DESCRIPTION = "Profile name in the AWS credentials file"
REGION_DESCRIPTION = "AWS region to use"


def default_gateway_factory(profile: str, region: str) -> DynamoGateway:
    return DynamoGateway(profile=profile, region=region)


class DynamoTools:
    """Tool handlers over DynamoGateway."""

    def __init__(self, gateway_factory: GatewayFactory = default_gateway_factory):
        self.gateway_factory = gateway_factory

    def get_item_dynamo(
        self,
        table_name: Annotated[str, Field(description="Table name, e.g. 'usrv-card'")],
        key: Annotated[
            dict[str, Any],
            Field(description="Primary key, e.g. {'id': '123'} or {'userId': 'abc', 'sortKey': 'xyz'}"),
        ],
        profile: Annotated[str, Field(description=PROFILE_DESCRIPTION)],
        region: Annotated[str, Field(description=REGION_DESCRIPTION)],
    ) -> str:
        """Get one item from a DynamoDB table by primary key."""
        try:
            item = self.gateway_factory(profile, region).get_item(table_name, key)
        except Exception as e:
            logger.exception(f"get-item-dynamo failed for {table_name}")
            return f"Error: get-item-dynamo failed for table {table_name} (key: {to_json(key)}): {e}"

        if item is None:
            return f"No item found with the given key in table {table_name}."
        return f"Item found: {to_json(item)}"

    def put_parameter_dynamo(
        self,
        environment: Annotated[Environment, Field(description="Microservice environment")],
        profile: Annotated[str, Field(description="AWS credentials profile (stored as awsAccount)")],
        usrv_name: Annotated[str, Field(description="Microservice name, e.g. 'usrv-card'")],
        short_name: Annotated[
            str, Field(description="Short name in UPPER_SNAKE_CASE, e.g. 'TIMEOUT_TRANSACTIONS_TABLES'")
        ],
        region: Annotated[str, Field(description=REGION_DESCRIPTION)],
        value: Annotated[str | None, Field(description="Value to set on value")] = None,
        values: Annotated[str | None, Field(description="Value to set on values")] = None,
        description: Annotated[str | None, Field(description="Parameter description")] = None,
        lambdas: Annotated[
            str, Field(description="Comma-separated list of lambdas or 'ALL'")
        ] = DEFAULT_PARAMETER_LAMBDAS,
    ) -> str:
        """Create or update a parameter in the parameter manager table."""
        item = build_parameter_item(
            environment,
            profile,
            usrv_name,
            short_name,
            region,
            value=value,
            values=values,
            description=description,
            lambdas=lambdas,
        )
        try:
            put_parameter(self.gateway_factory(profile, region), environment, item)
        except Exception as e:
            logger.exception(f"put-parameter-dynamo failed for {item['name']}")
            return (
                f"Error: put-parameter-dynamo failed for {item['name']} "
                f"in {parameters_table_name(environment)}: {e}"
            )
        return f"Parameter successfully saved: {to_json(item)}"

    def query_parameters_dynamo(
        self,
        environment: Annotated[Environment, Field(description="Microservice environment")],
        profile: Annotated[str, Field(description=PROFILE_DESCRIPTION)],
        usrv_name: Annotated[str, Field(description="Microservice name")],
        region: Annotated[str, Field(description=REGION_DESCRIPTION)],
    ) -> str:
        """Query the parameters of a microservice by scope."""
        scope = parameter_scope(environment, profile, usrv_name)
        table_name = parameters_table_name(environment)
        try:
            result = query_parameters(
                self.gateway_factory(profile, region), environment, profile, usrv_name
            )
        except Exception as e:
            logger.exception(f"query-parameters-dynamo failed for {scope}")
            return f"Error: query-parameters-dynamo failed for scope {scope} in {table_name}: {e}"

        if not result["items"]:
            return f"No parameters found for scope {scope} in table {table_name}."
        return f"Parameters found ({result['count']}):\n{to_json(result['items'], indent=2)}"

    def scan_table_dynamo(
        self,
        table_name: Annotated[str, Field(description="Table to scan")],
        profile: Annotated[str, Field(description=PROFILE_DESCRIPTION)],
        region: Annotated[str, Field(description=REGION_DESCRIPTION)],
        limit: Annotated[int | None, Field(ge=1, description="Maximum number of items")] = None,
    ) -> str:
        """Scan a DynamoDB table and return its items."""
        try:
            result = self.gateway_factory(profile, region).scan(table_name, limit=limit)
        except Exception as e:
            logger.exception(f"scan-table-dynamo failed for {table_name}")
            return f"Error: scan-table-dynamo failed for table {table_name}: {e}"

        text = f"Items found: {to_json(result['items'])}\nTotal items: {result['count']}"
        if result["last_evaluated_key"]:
            text += (
                f"\nMore items are available. Last evaluated key: "
                f"{to_json(result['last_evaluated_key'])}"
            )
        return text

    def list_tables_dynamo(
        self,
        profile: Annotated[str, Field(description=PROFILE_DESCRIPTION)],
        region: Annotated[str, Field(description=REGION_DESCRIPTION)],
        limit: Annotated[int | None, Field(ge=1, le=100, description="Maximum number of tables")] = None,
        exclusive_start_table_name: Annotated[
            str | None, Field(description="Table name to start listing after")
        ] = None,
    ) -> str:
        """List the DynamoDB tables of an AWS account."""
        try:
            result = self.gateway_factory(profile, region).list_tables(
                limit=limit, exclusive_start_table_name=exclusive_start_table_name
            )
        except Exception as e:
            logger.exception("list-tables-dynamo failed")
            return f"Error: list-tables-dynamo failed in region {region}: {e}"

        text = f"Tables found: {to_json(result['table_names'])}"
        if result["last_evaluated_table_name"]:
            text += (
                f"\nMore tables are available. Last evaluated table: "
                f"{result['last_evaluated_table_name']}"
            )
        return text
