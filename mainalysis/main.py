from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import redis
from slowapi.errors import RateLimitExceeded
from slowapi import _rate_limit_exceeded_handler
from sqlalchemy import text
from mainalysis.config import settings
from mainalysis.database import engine
from mainalysis.middleware.rate_limit import limiter
from mainalysis.routers import (
    accounts,
    analysis,
    credits,
    payments,
    history,
    registry,
    domain_of_the_day,
)

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mainalysis API",
    description="Análise, créditos e pagamentos para domínios tokenizados",
    version="1.0.0",
    debug=settings.DEBUG,
)

# Adicionar limiter ao app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Campos ausentes ou inválidos respondem 400 no formato {"error": ...}."""
    errors = exc.errors()
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in errors]
    message = "Missing or invalid fields"
    if fields:
        message = f"{message}: {', '.join(f for f in fields if f)}"
    return JSONResponse(
        status_code=400,
        content={"error": message, "detail": jsonable_encoder(errors)},
    )


# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)

# Incluir routers
app.include_router(accounts.router, prefix=settings.API_V1_PREFIX, tags=["accounts"])
app.include_router(analysis.router, prefix=settings.API_V1_PREFIX, tags=["analysis"])
app.include_router(credits.router, prefix=settings.API_V1_PREFIX, tags=["credits"])
app.include_router(payments.router, prefix=settings.API_V1_PREFIX, tags=["payments"])
app.include_router(history.router, prefix=settings.API_V1_PREFIX, tags=["history"])
app.include_router(registry.router, prefix=settings.API_V1_PREFIX, tags=["registry"])
app.include_router(domain_of_the_day.router, prefix=settings.API_V1_PREFIX, tags=["domain-of-the-day"])


@app.get("/")
async def root():
    return {"message": "Mainalysis API is running"}


@app.get("/health")
async def health():
    """Health check básico"""
    return {"status": "healthy"}


@app.get("/health/live")
async def health_live():
    """Liveness check - verifica se a aplicação está viva"""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness check - verifica se o banco responde"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "error": str(e)}
        )


@app.get("/health/detailed")
async def health_detailed():
    """Health check detalhado com status de dependências"""
    health_status = {
        "status": "healthy",
        "checks": {}
    }

    # Verificar banco de dados
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "ok"
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        health_status["checks"]["database"] = f"error: {str(e)}"
        health_status["status"] = "unhealthy"

    # Redis só importa quando o rate limiting usa Redis
    if settings.RATE_LIMIT_STORAGE_URI.startswith("redis"):
        try:
            r = redis.from_url(settings.RATE_LIMIT_STORAGE_URI)
            r.ping()
            health_status["checks"]["redis"] = "ok"
        except Exception as e:
            health_status["checks"]["redis"] = f"error: {str(e)}"
            if health_status["status"] == "healthy":
                health_status["status"] = "degraded"
    else:
        health_status["checks"]["redis"] = "not_used"

    # Providers externos: apenas configuração (não gasta cota)
    health_status["checks"]["valuation_provider"] = "configured" if settings.LLM_API_KEY else "not_configured"
    health_status["checks"]["paypal"] = (
        "configured" if settings.PAYPAL_CLIENT_ID and settings.PAYPAL_CLIENT_SECRET else "not_configured"
    )

    status_code = 200 if health_status["status"] != "unhealthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)
