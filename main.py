"""
FastAPI Application for the Scheduling Policy service.

Exposes the policy tools to calling agents over two surfaces:
- REST: GET /api/tools for the catalog, POST /api/tools/{name} to call one
- JSON-RPC 2.0 at POST /mcp with initialize, tools/list and tools/call
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from config import settings

from use_cases.scheduling import TOOL_REGISTRY, execute_tool, get_policy_service

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Reduce Azure SDK logging verbosity
logging.getLogger("azure.cosmos").setLevel(logging.WARNING)
logging.getLogger("azure.core").setLevel(logging.WARNING)
logging.getLogger("azure.identity").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

JSONRPC_VERSION = "2.0"
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    logger.info("Starting Scheduling Policy service...")

    # Build the policy store up front so the first tool call is not slowed down
    get_policy_service()
    logger.info(f"Policy service ready ({settings.policy_store} store, {len(TOOL_REGISTRY.get_tool_names())} tools)")

    yield

    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Scheduling Policy Service",
    description="Scheduling policies and booking conflict checks for medical-practice calendars",
    version=settings.service_version,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _tool_response(tool_name: str, result: str) -> Response:
    tool = TOOL_REGISTRY.get(tool_name)
    media_type = "text/plain" if tool and tool.returns_text else "application/json"
    return Response(content=result, media_type=media_type)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
        "policy_store": settings.policy_store,
    }


# =============================================================================
# REST TOOL ENDPOINTS
# =============================================================================

@app.get("/api/tools")
async def list_tools():
    """Return the tool catalog in OpenAI function-calling format."""
    return {"tools": TOOL_REGISTRY.get_catalog()}


@app.post("/api/tools/{tool_name}")
def call_tool(tool_name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    """
    Call a tool with a JSON object of arguments.

    Tool failures come back as {"error": ...} with status 200; only an
    unknown tool name is a 404.
    """
    if TOOL_REGISTRY.get(tool_name) is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown tool: {tool_name}"})
    return _tool_response(tool_name, execute_tool(tool_name, arguments or {}))


# =============================================================================
# JSON-RPC ENDPOINT
# =============================================================================

def _rpc_result(request_id: Any, result: Dict[str, Any]) -> JSONResponse:
    return JSONResponse({"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result})


def _rpc_error(request_id: Any, code: int, message: str) -> JSONResponse:
    return JSONResponse({
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    })


def _rpc_tool_list() -> Dict[str, Any]:
    return {
        "tools": [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.parameters,
            }
            for tool in TOOL_REGISTRY.get_tools()
        ]
    }


@app.post("/mcp")
async def rpc_endpoint(request: Request):
    """
    JSON-RPC 2.0 endpoint speaking the tools/list and tools/call methods.

    Tool results are wrapped as text content so agent runtimes that expect
    that envelope can consume them unchanged.
    """
    try:
        message = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _rpc_error(None, PARSE_ERROR, "Parse error")

    if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION or "method" not in message:
        return _rpc_error(None, INVALID_REQUEST, "Invalid request")

    request_id = message.get("id")
    method = message["method"]
    params = message.get("params") or {}

    # Notifications carry no id and get no response body
    if "id" not in message:
        logger.debug(f"Received notification {method}")
        return Response(status_code=202)

    if not isinstance(params, dict):
        return _rpc_error(request_id, INVALID_PARAMS, "params must be an object")

    if method == "initialize":
        return _rpc_result(request_id, {
            "protocolVersion": params.get("protocolVersion", "2024-11-05"),
            "capabilities": {"tools": {}},
            "serverInfo": {"name": settings.service_name, "version": settings.service_version},
        })

    if method == "tools/list":
        return _rpc_result(request_id, _rpc_tool_list())

    if method == "tools/call":
        name = params.get("name")
        if not isinstance(name, str):
            return _rpc_error(request_id, INVALID_PARAMS, "tools/call requires a tool name")
        text = await run_in_threadpool(execute_tool, name, params.get("arguments") or {})
        return _rpc_result(request_id, {"content": [{"type": "text", "text": text}]})

    return _rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower()
    )
