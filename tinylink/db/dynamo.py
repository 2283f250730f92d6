from decimal import Decimal
from typing import List, Optional
import logging

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from tinylink.core.exceptions import Conflict, NotFound, StoreError
from tinylink.db.store import LinkStore, utcnow
from tinylink.schemas.LinkRecord import LinkRecord

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
RESOURCE_NOT_FOUND = "ResourceNotFoundException"

# "#c" always names the key attribute in condition expressions
KEY_NAMES = {"#c": "code"}

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def marshall(item: dict) -> dict:
    return {k: _serializer.serialize(v) for k, v in item.items()}


def unmarshall(item: dict) -> dict:
    return {k: _deserializer.deserialize(v) for k, v in item.items()}


def _error_code(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


def _isoformat(value) -> str:
    return value.isoformat().replace("+00:00", "Z")


# Attributes every complete item carries; an unconditional UpdateItem on a
# deleted code leaves items with only code/clicks/lastClickedAt
REQUIRED_ATTRIBUTES = ("code", "url", "createdAt")


def _to_record(item: dict) -> Optional[LinkRecord]:
    """Build a LinkRecord, or None when the item is missing required attributes."""
    data = unmarshall(item)
    if any(name not in data for name in REQUIRED_ATTRIBUTES):
        return None
    clicks = data.get("clicks", 0)
    return LinkRecord(
        code=data["code"],
        url=data["url"],
        clicks=int(clicks) if isinstance(clicks, Decimal) else clicks,
        created_at=data["createdAt"],
        last_clicked_at=data.get("lastClickedAt"),
    )


class DynamoLinkStore(LinkStore):
    """
    LinkStore backed by a DynamoDB table whose hash key is `code`.

    Items look like
    {"code": S, "url": S, "clicks": N, "createdAt": S, "lastClickedAt": S}
    with ISO-8601 UTC timestamps.
    """

    def __init__(
        self,
        table_name: str,
        client=None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        create_table: bool = False,
    ):
        self.table_name = table_name
        self.create_table = create_table
        self.client = client or boto3.client(
            "dynamodb", region_name=region_name, endpoint_url=endpoint_url
        )

    def create(self, code: str, url: str) -> LinkRecord:
        now = utcnow()
        item = {"code": code, "url": url, "clicks": 0, "createdAt": _isoformat(now)}
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item=marshall(item),
                ConditionExpression="attribute_not_exists(#c)",
                ExpressionAttributeNames=KEY_NAMES,
            )
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise Conflict(f"Code '{code}' already exists") from e
            raise StoreError(f"DynamoDB put_item failed: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"DynamoDB put_item failed: {e}") from e
        return LinkRecord(code=code, url=url, clicks=0, created_at=now)

    def get(self, code: str) -> LinkRecord:
        try:
            result = self.client.get_item(
                TableName=self.table_name,
                Key=marshall({"code": code}),
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"DynamoDB get_item failed: {e}") from e

        item = result.get("Item")
        record = _to_record(item) if item else None
        if record is None:
            if item:
                logger.warning("Ignoring incomplete DynamoDB item for code %s", code)
            raise NotFound(f"Link '{code}' not found")
        return record

    def list(self) -> List[LinkRecord]:
        # Follows LastEvaluatedKey so tables over 1 MB are read completely
        records = []
        try:
            paginator = self.client.get_paginator("scan")
            for page in paginator.paginate(TableName=self.table_name):
                for item in page.get("Items", []):
                    record = _to_record(item)
                    if record is None:
                        logger.warning("Skipping incomplete DynamoDB item: %s", item.get("code", {}).get("S"))
                        continue
                    records.append(record)
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"DynamoDB scan failed: {e}") from e
        return records

    def delete(self, code: str) -> None:
        self._conditional_write(
            "delete_item",
            code,
            Key=marshall({"code": code}),
            ConditionExpression="attribute_exists(#c)",
            ExpressionAttributeNames=KEY_NAMES,
        )

    def increment_click(self, code: str) -> None:
        self._conditional_write(
            "update_item",
            code,
            Key=marshall({"code": code}),
            UpdateExpression="SET lastClickedAt = :t ADD clicks :inc",
            ConditionExpression="attribute_exists(#c)",
            ExpressionAttributeNames=KEY_NAMES,
            ExpressionAttributeValues=marshall({":t": _isoformat(utcnow()), ":inc": 1}),
        )

    def _conditional_write(self, operation: str, code: str, **kwargs) -> None:
        try:
            getattr(self.client, operation)(TableName=self.table_name, **kwargs)
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise NotFound(f"Link '{code}' not found") from e
            raise StoreError(f"DynamoDB {operation} failed: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"DynamoDB {operation} failed: {e}") from e

    def initialize(self) -> None:
        if not self.create_table:
            return
        try:
            self.client.describe_table(TableName=self.table_name)
            logger.info("DynamoDB table '%s' exists.", self.table_name)
            return
        except ClientError as e:
            if _error_code(e) != RESOURCE_NOT_FOUND:
                raise StoreError(f"DynamoDB describe_table failed: {e}") from e

        logger.info("Creating DynamoDB table '%s'.", self.table_name)
        self.client.create_table(
            TableName=self.table_name,
            KeySchema=[{"AttributeName": "code", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "code", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        self.client.get_waiter("table_exists").wait(TableName=self.table_name)

    def ping(self) -> bool:
        try:
            self.client.describe_table(TableName=self.table_name)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"DynamoDB table check failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()
