"""DynamoDB-backed key-value store, one table per entity kind."""

from typing import Any, Dict, List, Optional

import boto3

from repositories.kv_store import Item, KeyValueStore


class DynamoDbStore(KeyValueStore):
    """
    Map string ids to items in a table whose partition key is ``id``.

    DynamoDB rejects empty keys and keys over 2048 bytes, so lookups for
    such keys report the item as absent without calling the table.
    """

    key_name = "id"
    max_key_bytes = 2048

    def __init__(self, table_name: str, table: Any = None):
        self.table_name = table_name
        self.table = table if table is not None else boto3.resource("dynamodb").Table(table_name)

    def _key(self, key: str) -> Dict[str, str]:
        return {self.key_name: key}

    def _addressable(self, key: Any) -> bool:
        return (
            isinstance(key, str)
            and 0 < len(key.encode()) <= self.max_key_bytes
        )

    def get(self, key: str) -> Optional[Item]:
        """Fetch one item with a strongly consistent read."""
        if not self._addressable(key):
            return None
        resp = self.table.get_item(Key=self._key(key), ConsistentRead=True)
        return resp.get("Item")

    def insert(self, key: str, item: Item) -> Optional[Item]:
        """Put an item, returning whatever it replaced."""
        resp = self.table.put_item(
            Item={**item, self.key_name: key},
            ReturnValues="ALL_OLD",
        )
        return resp.get("Attributes")

    def remove(self, key: str) -> Optional[Item]:
        """Delete an item, returning the deleted attributes."""
        if not self._addressable(key):
            return None
        resp = self.table.delete_item(Key=self._key(key), ReturnValues="ALL_OLD")
        return resp.get("Attributes")

    def values(self) -> List[Item]:
        """Scan the whole table, following pagination."""
        items: List[Item] = []
        kwargs: Dict[str, Any] = {"ConsistentRead": True}
        while True:
            resp = self.table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return sorted(items, key=lambda item: item[self.key_name])

    def contains_key(self, key: str) -> bool:
        if not self._addressable(key):
            return False
        resp = self.table.get_item(
            Key=self._key(key),
            ConsistentRead=True,
            ProjectionExpression="#k",
            ExpressionAttributeNames={"#k": self.key_name},
        )
        return "Item" in resp
