from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str

    # Ambiente
    ENVIRONMENT: str = "development"
    DEV_MODE: bool = True  # Modo desenvolvimento (permite token "test")

    # API
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = True

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Provider de valuation (API compatível com OpenAI: Groq por padrão)
    LLM_API_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT: int = 60
    LLM_MAX_RETRIES: int = 3

    # PayPal
    PAYPAL_CLIENT_ID: str = ""
    PAYPAL_CLIENT_SECRET: str = ""
    PAYPAL_MODE: str = "sandbox"  # sandbox | live
    PAYPAL_TIMEOUT: int = 15
    PAYPAL_BRAND_NAME: str = "Mainalysis"
    PAYPAL_CURRENCY: str = "USD"
    PRICE_PER_CREDIT: float = 0.50

    # Registry GraphQL (Doma)
    REGISTRY_GRAPHQL_URL: str = "https://api-testnet.doma.xyz/graphql"
    REGISTRY_API_KEY: str = ""
    REGISTRY_CHAIN_ID: int = 97476
    REGISTRY_TIMEOUT: int = 15

    # Supabase Auth
    SUPABASE_JWKS_URL: str = ""  # endpoint para pegar chaves públicas (/.well-known/jwks.json)
    SUPABASE_JWT_SECRET: str = ""  # projetos com HS256
    SUPABASE_AUDIENCE: str = "authenticated"

    # Rate Limiting
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_PER_IP: str = "120/minute"
    RATE_LIMIT_ANALYZE: str = "30/minute"
    RATE_LIMIT_TRUST_PROXY: bool = False  # só confiar em X-Forwarded-For atrás de proxy

    # Fluxo de análise / histórico
    ANALYSIS_CLAIM_TTL_SECONDS: int = 300
    HISTORY_DEDUP_SECONDS: int = 5
    HISTORY_LIMIT: int = 50
    TRANSACTION_HISTORY_LIMIT: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


settings = Settings()
