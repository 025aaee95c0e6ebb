"""
Data layer construct: one DynamoDB table per entity kind.

The tables are independent; nothing in the stack links their writes.
"""

from typing import Dict

from aws_cdk import (
    RemovalPolicy,
    aws_dynamodb as dynamodb,
)
from constructs import Construct

ENTITY_TABLES = ("customers", "interactions", "purchases")


class DataLayerConstruct(Construct):
    """Provision the identifier-keyed record tables."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        table_names: Dict[str, str],
        point_in_time_recovery: bool = False,
        retain_tables: bool = False,
    ) -> None:
        super().__init__(scope, construct_id)

        removal_policy = RemovalPolicy.RETAIN if retain_tables else RemovalPolicy.DESTROY

        self.tables: Dict[str, dynamodb.Table] = {}
        for entity in ENTITY_TABLES:
            self.tables[entity] = dynamodb.Table(
                self,
                f"{entity.capitalize()}Table",
                table_name=table_names[entity],
                partition_key=dynamodb.Attribute(
                    name="id", type=dynamodb.AttributeType.STRING
                ),
                billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
                point_in_time_recovery=point_in_time_recovery,
                removal_policy=removal_policy,
            )

    @property
    def customers_table(self) -> dynamodb.Table:
        return self.tables["customers"]

    @property
    def interactions_table(self) -> dynamodb.Table:
        return self.tables["interactions"]

    @property
    def purchases_table(self) -> dynamodb.Table:
        return self.tables["purchases"]
