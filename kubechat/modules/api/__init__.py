"""
API Module - Black Box Interface

Purpose: HTTP request and response contracts
Interface: CommandRequest, CommandResponse, HealthResponse
Hidden: Validation rules

The API module only describes payloads - routing lives in kubechat.main and
all logic is delegated to the executor module.
"""

from .models import CommandRequest, CommandResponse, HealthResponse

__all__ = ["CommandRequest", "CommandResponse", "HealthResponse"]
