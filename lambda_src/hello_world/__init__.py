"""Tenant-aware hello-world Lambda handler."""

from .environment import ExecutionEnvironment
from .lambda_function import handle, handler

__all__ = ["ExecutionEnvironment", "handle", "handler"]
