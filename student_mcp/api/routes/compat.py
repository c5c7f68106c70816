"""Client Compatibility — stub endpoints some MCP clients probe before connecting.

Invariants:
    - POST /register always succeeds with {"result": "ok"}
    - The OAuth discovery document is empty: the server requires no authorization
"""

from fastapi import APIRouter

router = APIRouter(tags=["compat"])


@router.post("/register")
async def register():
    return {"result": "ok"}


@router.get("/.well-known/oauth-authorization-server")
async def oauth_metadata():
    return {}
