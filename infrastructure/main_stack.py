"""
Main CDK Stack for the CRM record store.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.config.settings import Settings
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.constructs.data_layer import ENTITY_TABLES, DataLayerConstruct


class CrmStoreStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "crm-store")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        table_names = {entity: settings.table_name(entity) for entity in ENTITY_TABLES}

        # 1) Data layer.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            table_names=table_names,
            point_in_time_recovery=settings.point_in_time_recovery,
            retain_tables=settings.retain_tables,
        )

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            table_names=table_names,
            log_level=settings.log_level,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Permissions for the API Lambda.
        for entity, table in data_construct.tables.items():
            table.grant_read_write_data(api_construct.main_lambda)
            CfnOutput(self, f"{entity.capitalize()}Table", value=table.table_name)

        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
