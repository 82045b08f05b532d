from types import SimpleNamespace

import pytest

from hello_world import ExecutionEnvironment


def _make_context(**overrides):
    fields = {
        "function_name": "hello-world",
        "function_version": "$LATEST",
        "invoked_function_arn": "arn:aws:lambda:us-west-2:123456789012:function:hello-world",
        "memory_limit_in_mb": "128",
        "aws_request_id": "c6af9ac6-7b61-11e6-9a41-93e812345678",
        "log_group_name": "/aws/lambda/hello-world",
        "log_stream_name": "2026/10/19/[$LATEST]abcdef",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def environment() -> ExecutionEnvironment:
    return ExecutionEnvironment()


@pytest.fixture
def api_event() -> dict:
    return {
        "resource": "/hello",
        "path": "/hello",
        "httpMethod": "GET",
        "headers": {"Accept": "application/json"},
        "queryStringParameters": None,
        "body": None,
        "isBase64Encoded": False,
    }


@pytest.fixture
def make_context():
    return _make_context
