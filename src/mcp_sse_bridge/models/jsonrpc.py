"""
JSON-RPC 2.0 message models.

Top-level envelopes are strict: unknown keys are rejected and ``jsonrpc`` must be
exactly "2.0". Batches are not part of the accepted schema.
"""
from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, RootModel, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"

RequestId = Union[StrictInt, StrictStr]


class JSONRPCRequest(BaseModel):
    """A request that expects a response."""
    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"]
    id: RequestId
    method: StrictStr
    params: Optional[Dict[str, Any]] = None


class JSONRPCNotification(BaseModel):
    """A one-way message, no response expected."""
    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"]
    method: StrictStr
    params: Optional[Dict[str, Any]] = None


class JSONRPCResponse(BaseModel):
    """A successful response to a request."""
    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"]
    id: RequestId
    result: Dict[str, Any]


class ErrorData(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: StrictInt
    message: StrictStr
    data: Optional[Any] = None


class JSONRPCError(BaseModel):
    """A response that indicates a request failed."""
    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"]
    id: RequestId
    error: ErrorData


class JSONRPCMessage(RootModel[Union[JSONRPCRequest, JSONRPCNotification, JSONRPCResponse, JSONRPCError]]):
    """Any single JSON-RPC envelope."""


def parse_message(data: Any) -> JSONRPCMessage:
    """
    Validate decoded JSON against the message schema.

    Raises:
        pydantic.ValidationError: if ``data`` is not a valid JSON-RPC envelope
    """
    return JSONRPCMessage.model_validate(data)


def serialize_message(message: Union[JSONRPCMessage, JSONRPCRequest, JSONRPCNotification, JSONRPCResponse, JSONRPCError]) -> str:
    """Serialize a message to a single line of JSON."""
    if isinstance(message, JSONRPCMessage):
        message = message.root
    return message.model_dump_json(exclude_none=True)
