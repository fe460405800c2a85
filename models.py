# Airbnb MCP Data Models

from pydantic import BaseModel, StrictInt, model_validator
from typing import Dict, Any, Optional, Union

# JSON-RPC エラーコード
TOOL_EXECUTION_ERROR = -32000
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

RequestId = Optional[Union[StrictInt, float, str]]


class MCPRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: RequestId = None
    method: Optional[Any] = None
    params: Optional[Any] = None


class MCPError(BaseModel):
    code: int
    message: str


class MCPResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: RequestId = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[MCPError] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("exactly one of result or error must be set")
        return self

    @classmethod
    def success(cls, request_id: RequestId, result: Dict[str, Any]) -> "MCPResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId, code: int, message: str) -> "MCPResponse":
        return cls(id=request_id, error=MCPError(code=code, message=message))

    def to_wire(self) -> Dict[str, Any]:
        """JSON-RPC 2.0 形式（result/error のどちらか一方のみ）"""
        data: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = self.result
        return data


class ToolDescription(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]
