# gymtrack/deps/engine.py
from fastapi import Depends, Header, HTTPException, Request, status

from gymtrack.engine import EngineRegistry, SessionEngine

def get_registry(request: Request) -> EngineRegistry:
    return request.app.state.registry

def get_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """Authentication happens upstream; the gateway forwards the user id."""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None

def require_user_id(user_id: str | None = Depends(get_user_id)) -> str:
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id")
    return user_id

def get_engine(template_id: str, registry: EngineRegistry = Depends(get_registry)) -> SessionEngine:
    engine = registry.get(template_id)
    if engine is None or engine.closed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No day loaded for this routine")
    return engine
