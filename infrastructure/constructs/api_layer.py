"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda serves every RPC operation, keeping the DynamoDB clients warm.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from typing import Dict

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


class ApiLayerConstruct(Construct):
    """Expose the record store operations via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        table_names: Dict[str, str],
        log_level: str = "INFO",
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 10,
    ) -> None:
        super().__init__(scope, construct_id)

        # AWS-managed Powertools layer (includes pydantic, boto3 extras)
        # Using x86_64 for CI/CD compatibility (GitHub runners are x86_64)
        powertools_layer = _lambda.LayerVersion.from_layer_version_arn(
            self,
            "PowertoolsLayer",
            f"arn:aws:lambda:{scope.region}:017000801446:layer:AWSLambdaPowertoolsPythonV3-python312-x86:7"
        )

        # Installs python-json-logger on top of the layer
        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            layers=[powertools_layer],
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment={
                "ENVIRONMENT": environment,
                "STORAGE_BACKEND": "dynamodb",
                "CUSTOMERS_TABLE": table_names["customers"],
                "INTERACTIONS_TABLE": table_names["interactions"],
                "PURCHASES_TABLE": table_names["purchases"],
                "LOG_LEVEL": log_level,
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"crm-store-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.GET, apigw.CorsHttpMethod.POST],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        route_defs = [
            (apigw.HttpMethod.POST, "/rpc/{operation}"),
            (apigw.HttpMethod.GET, "/health"),
        ]

        for method, path in route_defs:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
