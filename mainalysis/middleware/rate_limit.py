"""
Rate limiting com slowapi (memória em dev, Redis em produção)
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from mainalysis.config import settings


def get_rate_limit_key(request: Request) -> str:
    """
    Gera chave para rate limiting baseada no IP do cliente.
    X-Forwarded-For só é usado atrás de proxy confiável (RATE_LIMIT_TRUST_PROXY).
    """
    if settings.RATE_LIMIT_TRUST_PROXY:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # O último hop é o adicionado pelo nosso proxy
            return f"ip:{forwarded_for.split(',')[-1].strip()}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
