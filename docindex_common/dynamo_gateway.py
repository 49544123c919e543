"""
DynamoDB adapter for the key-value store tools.

Single-table operations go through the boto3 resource API (native Python
values in and out). Transactions and table listing use the low-level
client, with values converted by TypeSerializer/TypeDeserializer.
"""

import json
import logging
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

logger = logging.getLogger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def serialize_item(item: dict[str, Any]) -> dict[str, Any]:
    return {key: _serializer.serialize(value) for key, value in item.items()}


def deserialize_item(item: dict[str, Any]) -> dict[str, Any]:
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any, indent: int | None = None) -> str:
    """JSON-encode DynamoDB output (Decimal, set and binary aware)."""
    return json.dumps(value, default=_json_default, indent=indent, ensure_ascii=False)


def _drop_none(**kwargs: Any) -> dict[str, Any]:
    """boto3 rejects None for optional parameters; omit them instead."""
    return {key: value for key, value in kwargs.items() if value is not None}


def _serialize_transact_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """Convert Item, Key and ExpressionAttributeValues of one transact entry."""
    converted = {}
    for operation, params in entry.items():
        params = dict(params)
        for field in ("Item", "Key", "ExpressionAttributeValues"):
            if field in params:
                params[field] = serialize_item(params[field])
        converted[operation] = params
    return converted


class DynamoGateway:
    """
    DynamoDB operations scoped to one AWS profile and region.

    Usage:
        gateway = DynamoGateway(profile="dev-account", region="us-east-1")
        item = gateway.get_item("usrv-card", {"id": "123"})
    """

    def __init__(
        self,
        profile: str | None = None,
        region: str | None = None,
        session: boto3.Session | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            profile: Named profile from the AWS credentials file
            region: AWS region
            session: Pre-built session (profile and region are then ignored)
        """
        self.session = session or boto3.Session(profile_name=profile, region_name=region)
        self._resource = None
        self._client = None

    @property
    def resource(self):
        """Lazy-load DynamoDB resource."""
        if self._resource is None:
            self._resource = self.session.resource("dynamodb")
        return self._resource

    @property
    def client(self):
        """Lazy-load low-level DynamoDB client."""
        if self._client is None:
            self._client = self.session.client("dynamodb")
        return self._client

    def table(self, table_name: str):
        return self.resource.Table(table_name)

    # =========================================================================
    # Single-item operations
    # =========================================================================

    def get_item(
        self,
        table_name: str,
        key: dict[str, Any],
        consistent_read: bool | None = None,
        projection_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
    ) -> dict[str, Any] | None:
        """Return the item, or None if no item has that key."""
        response = self.table(table_name).get_item(
            Key=key,
            **_drop_none(
                ConsistentRead=consistent_read,
                ProjectionExpression=projection_expression,
                ExpressionAttributeNames=expression_attribute_names,
            ),
        )
        return response.get("Item")

    def put_item(
        self,
        table_name: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> None:
        self.table(table_name).put_item(
            Item=item,
            **_drop_none(
                ConditionExpression=condition_expression,
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
            ),
        )
        logger.debug(f"Put item into {table_name}")

    def delete_item(
        self,
        table_name: str,
        key: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any] | None:
        """Delete an item; returns its old attributes when return_values="ALL_OLD"."""
        response = self.table(table_name).delete_item(
            Key=key,
            **_drop_none(
                ConditionExpression=condition_expression,
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                ReturnValues=return_values,
            ),
        )
        return response.get("Attributes")

    def update_item(
        self,
        table_name: str,
        key: dict[str, Any],
        update_expression: str,
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any] | None:
        response = self.table(table_name).update_item(
            Key=key,
            UpdateExpression=update_expression,
            **_drop_none(
                ConditionExpression=condition_expression,
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                ReturnValues=return_values,
            ),
        )
        return response.get("Attributes")

    # =========================================================================
    # Multi-item operations
    # =========================================================================

    def query(
        self,
        table_name: str,
        key_condition_expression: str,
        index_name: str | None = None,
        filter_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        limit: int | None = None,
        scan_index_forward: bool | None = None,
        consistent_read: bool | None = None,
        exclusive_start_key: dict[str, Any] | None = None,
        projection_expression: str | None = None,
    ) -> dict[str, Any]:
        """
        Query one page of items.

        Returns:
            {"items": [...], "count": int, "last_evaluated_key": dict | None}
        """
        response = self.table(table_name).query(
            KeyConditionExpression=key_condition_expression,
            **_drop_none(
                IndexName=index_name,
                FilterExpression=filter_expression,
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                Limit=limit,
                ScanIndexForward=scan_index_forward,
                ConsistentRead=consistent_read,
                ExclusiveStartKey=exclusive_start_key,
                ProjectionExpression=projection_expression,
            ),
        )
        return _page(response)

    def scan(
        self,
        table_name: str,
        index_name: str | None = None,
        filter_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        limit: int | None = None,
        consistent_read: bool | None = None,
        exclusive_start_key: dict[str, Any] | None = None,
        projection_expression: str | None = None,
        segment: int | None = None,
        total_segments: int | None = None,
    ) -> dict[str, Any]:
        """Scan one page of items; same result shape as query()."""
        response = self.table(table_name).scan(
            **_drop_none(
                IndexName=index_name,
                FilterExpression=filter_expression,
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=expression_attribute_values,
                Limit=limit,
                ConsistentRead=consistent_read,
                ExclusiveStartKey=exclusive_start_key,
                ProjectionExpression=projection_expression,
                Segment=segment,
                TotalSegments=total_segments,
            )
        )
        return _page(response)

    def batch_get_items(self, request_items: dict[str, dict[str, Any]]) -> dict[str, list]:
        """
        Batch get across tables.

        Args:
            request_items: {table_name: {"Keys": [...], ...}}

        Returns:
            {table_name: [items]}
        """
        response = self.resource.batch_get_item(RequestItems=request_items)
        return response.get("Responses", {})

    def batch_write_items(self, request_items: dict[str, list[dict[str, Any]]]) -> dict[str, list]:
        """
        Batch put/delete across tables.

        Returns:
            Unprocessed items, keyed by table name (empty when all succeeded)
        """
        response = self.resource.batch_write_item(RequestItems=request_items)
        unprocessed = response.get("UnprocessedItems", {})
        if unprocessed:
            logger.warning(f"Batch write left unprocessed items in {list(unprocessed)}")
        return unprocessed

    def transact_get_items(self, transact_items: list[dict[str, Any]]) -> list[dict[str, Any] | None]:
        """
        Transactional get.

        Args:
            transact_items: [{"Get": {"TableName": ..., "Key": {...}}}, ...]

        Returns:
            One item (or None when missing) per request, in request order
        """
        response = self.client.transact_get_items(
            TransactItems=[_serialize_transact_entry(entry) for entry in transact_items]
        )
        return [
            deserialize_item(entry["Item"]) if entry.get("Item") else None
            for entry in response.get("Responses", [])
        ]

    def transact_write_items(self, transact_items: list[dict[str, Any]]) -> None:
        """
        Transactional write of Put, Update, Delete and ConditionCheck entries.

        Raises:
            botocore.exceptions.ClientError: TransactionCanceledException if any
                condition fails; no entry is applied in that case
        """
        self.client.transact_write_items(
            TransactItems=[_serialize_transact_entry(entry) for entry in transact_items]
        )

    def list_tables(
        self,
        limit: int | None = None,
        exclusive_start_table_name: str | None = None,
    ) -> dict[str, Any]:
        """
        List table names.

        Returns:
            {"table_names": [...], "last_evaluated_table_name": str | None}
        """
        response = self.client.list_tables(
            **_drop_none(Limit=limit, ExclusiveStartTableName=exclusive_start_table_name)
        )
        return {
            "table_names": response.get("TableNames", []),
            "last_evaluated_table_name": response.get("LastEvaluatedTableName"),
        }


def _page(response: dict[str, Any]) -> dict[str, Any]:
    return {
        "items": response.get("Items", []),
        "count": response.get("Count", 0),
        "last_evaluated_key": response.get("LastEvaluatedKey"),
    }
