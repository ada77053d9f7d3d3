from fastapi import HTTPException
import httpx
from jose import jwt, JWTError
from mainalysis.config import settings

JWKS_CACHE = None

DEV_TOKEN = "test"
DEV_PAYLOAD = {"sub": "00000000-0000-0000-0000-000000000001", "email": "dev@local"}


async def get_jwks():
    global JWKS_CACHE
    if JWKS_CACHE:
        return JWKS_CACHE

    async with httpx.AsyncClient() as client:
        r = await client.get(settings.SUPABASE_JWKS_URL, timeout=10)
        r.raise_for_status()
        JWKS_CACHE = r.json()
        return JWKS_CACHE


async def validate_token(token: str):
    if settings.DEV_MODE and token == DEV_TOKEN:
        return dict(DEV_PAYLOAD)

    try:
        if settings.SUPABASE_JWT_SECRET:
            return jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                audience=settings.SUPABASE_AUDIENCE,
                algorithms=["HS256"]
            )

        if not settings.SUPABASE_JWKS_URL:
            raise HTTPException(status_code=500, detail="Supabase auth not configured")

        jwks = await get_jwks()
        unverified = jwt.get_unverified_header(token)

        for key in jwks["keys"]:
            if key["kid"] == unverified.get("kid"):
                return jwt.decode(
                    token,
                    key,
                    audience=settings.SUPABASE_AUDIENCE,
                    algorithms=["RS256"]
                )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    raise HTTPException(status_code=401, detail="Invalid token")
