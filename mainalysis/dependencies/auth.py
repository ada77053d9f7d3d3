from typing import Optional, Dict, Any
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging
from mainalysis.services.supabase_auth import validate_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def parse_raw_auth_header(request: Request) -> Optional[str]:
    """Retorna o token puro caso Authorization não siga o esquema 'Bearer <token>'."""
    header = request.headers.get("authorization")
    if not header:
        return None
    parts = header.strip().split()
    if len(parts) == 1:
        return parts[0]
    if len(parts) >= 2:
        return parts[1]
    return None


async def get_current_user(
    request: Request,
    cred: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Dependência para rotas administrativas (domain of the day).
    - Aceita 'Authorization: Bearer <token>' ou só o token
    - Ambiente dev aceita token 'test' (se DEV_MODE=true)
    - Valida JWT do Supabase e retorna o payload
    """
    token = cred.credentials if cred else parse_raw_auth_header(request)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required"
        )

    try:
        payload = await validate_token(token)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during authentication: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed"
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing 'sub' claim"
        )

    logger.info(f"Authenticated user (Supabase): {payload['sub']}")
    return payload
