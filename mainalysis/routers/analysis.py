"""
Router para análise de domínios (compatível com a função analyze-domain)
"""
import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from mainalysis.config import settings
from mainalysis.database import get_db
from mainalysis.exceptions import ConfigurationError
from mainalysis.middleware.rate_limit import limiter
from mainalysis.schemas.analysis import AnalyzeDomainRequest, AnalyzeDomainResponse
from mainalysis.services.analysis_service import (
    analyze_domain,
    AccountNotFound,
    AnalysisInProgress,
    AnalysisPersistenceError,
    InsufficientCredits,
)
from mainalysis.utils.responses import error_response
from mainalysis.services.valuation_client import (
    ValuationClient,
    ValuationProviderError,
    get_valuation_client,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/analyze-domain", response_model=AnalyzeDomainResponse)
@limiter.limit(settings.RATE_LIMIT_ANALYZE)
async def analyze_domain_endpoint(
    request: Request,
    payload: AnalyzeDomainRequest,
    db: Session = Depends(get_db),
    client: ValuationClient = Depends(get_valuation_client),
):
    """
    Retorna a análise do domínio para a conta.

    - Análise em cache: retorna com cached=true e não cobra créditos
    - Análise nova: custa 1 crédito (search_listed) ou 3 (new_analysis, fractionalize)
    - Saldo insuficiente: 402 com mensagem "Insufficient credits..."
    """
    try:
        result = analyze_domain(
            db=db,
            domain_name=payload.domain_name,
            account_id=payload.account_id,
            client=client,
            source=payload.source,
            price=payload.price,
        )
    except AccountNotFound as e:
        return error_response(status.HTTP_404_NOT_FOUND, str(e))
    except InsufficientCredits as e:
        return error_response(status.HTTP_402_PAYMENT_REQUIRED, str(e))
    except AnalysisInProgress as e:
        return error_response(status.HTTP_409_CONFLICT, str(e))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except ValuationProviderError as e:
        logger.error(f"Valuation provider error for {payload.domain_name}: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except AnalysisPersistenceError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        logger.error(f"Error in analyze-domain: {e}", exc_info=True)
        db.rollback()
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return AnalyzeDomainResponse(
        success=True,
        cached=result.cached,
        data=result.data,
        price=result.price,
        credits_charged=result.credits_charged,
    )
