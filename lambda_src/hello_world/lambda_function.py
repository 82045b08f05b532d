# lambda_function.py
import json
import logging
import os
from dataclasses import dataclass

from .environment import ExecutionEnvironment


def resolve_log_level(value: str | None) -> int:
    """Translate the platform's log level setting into a `logging` level.

    The platform also allows TRACE, which `logging` does not know. Unknown
    names fall back to INFO so a bad setting cannot stop the module loading.
    """
    name = (value or "INFO").upper()
    if name == "TRACE":
        name = "DEBUG"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


logger = logging.getLogger("hello_world")
logger.setLevel(resolve_log_level(os.environ.get("AWS_LAMBDA_LOG_LEVEL")))

# This is set once per *execution environment* (i.e., per warm container).
# Every invocation served by the same container sees the same instance.
ENVIRONMENT = ExecutionEnvironment()

SUCCESS_MESSAGE = "hello world"
FAILURE_MESSAGE = "some error happened"

CONTEXT_FIELDS = (
    "function_name",
    "function_version",
    "invoked_function_arn",
    "memory_limit_in_mb",
    "aws_request_id",
    "log_group_name",
    "log_stream_name",
    "tenant_id",
)


@dataclass(frozen=True)
class Success:
    body: dict


@dataclass(frozen=True)
class Failure:
    error: Exception


def get_tenant_id(context) -> str | None:
    """Tenant id of the caller, or None when the function is not tenant-isolated."""
    return getattr(context, "tenant_id", None)


def describe_context(context) -> dict:
    # The Lambda context object is not JSON serializable.
    return {name: getattr(context, name, None) for name in CONTEXT_FIELDS}


def _to_json(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def process_invocation(event, context, environment: ExecutionEnvironment) -> Success | Failure:
    try:
        count = environment.record_invocation()

        tenant_id = get_tenant_id(context)

        logger.info("Event: %s", json.dumps(event, indent=2, default=str))
        logger.info("Context: %s", json.dumps(describe_context(context), indent=2, default=str))
        logger.info("Tenant ID: %s", tenant_id)
        logger.info("Execution Environment ID: %s", environment.environment_id)
        logger.info("Environment started at: %s", environment.started_at)
        logger.info("Invocation Count: %d", count)

        return Success(
            {
                "message": SUCCESS_MESSAGE,
                "tenantId": tenant_id,
                "executionEnvironmentId": environment.environment_id,
                "invocationCount": count,
            }
        )
    except Exception as e:
        return Failure(e)


def handle(event, context, environment: ExecutionEnvironment) -> dict:
    """Run one invocation against `environment` and map the outcome to an HTTP response.

    Never raises: any failure becomes the fixed 500 response and the error
    detail goes to the log only.
    """
    try:
        result = process_invocation(event, context, environment)
        if isinstance(result, Success):
            return {"statusCode": 200, "body": _to_json(result.body)}
    except Exception as e:
        result = Failure(e)

    logger.error("Invocation failed", exc_info=result.error)
    return {"statusCode": 500, "body": _to_json({"message": FAILURE_MESSAGE})}


def handler(event, context):
    return handle(event, context, ENVIRONMENT)
