"""AWS Lambda handler for API Gateway requests.

API Gateway events are served by the FastAPI application through the Mangum
ASGI adapter. Lifespan events are off, so the background cache sweep does not
run; expired entries are still never served because ``get`` checks expiry.
"""

import json
import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_fastapi_app, initialize_lambda_environment
from menu_catalog_service.models.api_models import ErrorResponse

logger = logging.getLogger(__name__)

# Initialize during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()
    mangum_handler: Mangum | None = Mangum(get_fastapi_app(), lifespan="off")
else:
    mangum_handler = None


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway requests.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        if mangum_handler is None:
            raise RuntimeError("Lambda handler is not initialized")
        result: dict[str, Any] = mangum_handler(event, context)
        return result
    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(
                ErrorResponse(
                    error="Internal Server Error", message="Internal Server Error"
                ).to_content()
            ),
        }
