"""
Cliente do provider de valuation (LLM com API compatível com OpenAI, Groq por padrão).
Gera métricas de valor, tráfego e SEO de um domínio em JSON.
"""
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional
import requests
from mainalysis.config import settings
from mainalysis.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("valueHistory", "trafficData", "seoMetrics")
DEFAULT_SEARCH_VOLUME = "5K"
DEFAULT_KEYWORD_VOLUME = 1000

SYSTEM_MESSAGE = (
    "You are a domain valuation expert. Always respond with valid JSON only, "
    "no markdown, no explanations, just the JSON object."
)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class ValuationProviderError(Exception):
    """Exceção genérica para erros do provider de valuation"""
    pass


class ValuationRateLimit(ValuationProviderError):
    """Exceção para rate limit (429)"""
    pass


class ValuationUnauthorized(ValuationProviderError):
    """Exceção para erros de autenticação (401/403)"""
    pass


def build_prompt(domain_name: str, price_wei: Optional[int] = None) -> str:
    """
    Monta o prompt de análise. Só pede estimativa de preço quando o
    chamador não informou um preço.
    """
    if price_wei:
        price_context = (
            f"The domain is currently priced at {price_wei / 1e18:.4f} ETH; "
            "use that price as the reference for the value history."
        )
        price_field = ""
    else:
        price_context = "Please estimate a fair market price for this domain in ETH based on its characteristics."
        price_field = ',\n  "estimatedPrice": estimated fair market value in ETH as a number'

    return f"""Analyze the domain "{domain_name}". {price_context}

Consider brand recognition, length and memorability, TLD quality (.com, .io, .ai are premium),
keyword relevance and the presence of hyphens or numbers. Show realistic month-to-month
fluctuation instead of linear growth.

Provide the analysis in JSON format with the following structure:

{{
  "valueHistory": [6 items {{"month": "Mar", "value": number}} for Mar, Apr, May, Jun, Jul, Aug],
  "trafficData": [6 items {{"month": "Mar", "visits": number}}],
  "seoMetrics": [
    {{"label": "Domain Authority", "score": 0-100, "max": 100}},
    {{"label": "Page Authority", "score": 0-100, "max": 100}},
    {{"label": "Trust Score", "score": 0-100, "max": 100}},
    {{"label": "Spam Score", "score": 0-100, "max": 100, "inverse": true}}
  ],
  "keywordData": [5-10 items {{"keyword": string, "volume": monthly search volume, "difficulty": 0-100}}],
  "features": [
    {{"label": "Short & Memorable", "available": boolean}},
    {{"label": "Easy to Spell", "available": boolean}},
    {{"label": "Brandable", "available": boolean}},
    {{"label": "SEO Friendly", "available": boolean}},
    {{"label": "No Hyphens", "available": boolean}},
    {{"label": "No Numbers", "available": boolean}},
    {{"label": "Premium TLD", "available": boolean}},
    {{"label": "Social Media Available", "available": boolean}}
  ],
  "marketScore": 1-10 rating,
  "estimatedGrowth": "+XX%" string,
  "searchVolume": monthly searches as string using K/M (e.g. "12.5K"),
  "domainAge": number of years,
  "registrationYear": year like 2015,
  "summary": "2-3 sentence summary about the domain's value proposition"{price_field}
}}

Return ONLY valid JSON, no additional text."""


def extract_json_object(text: str) -> str:
    """
    Extrai o primeiro objeto {...} balanceado de uma resposta que pode
    conter markdown ou texto ao redor. Respeita strings e escapes.
    """
    cleaned = _FENCE_RE.sub("", text.strip())

    start = cleaned.find("{")
    if start == -1:
        raise ValueError("No JSON object found in response")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(cleaned)):
        char = cleaned[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return cleaned[start:index + 1]

    raise ValueError("Unbalanced JSON object in response")


def parse_analysis(text: str) -> Dict[str, Any]:
    """
    Converte o texto do LLM em dict e valida os campos obrigatórios.

    Raises:
        ValuationProviderError: JSON inválido ou campos obrigatórios ausentes
    """
    try:
        data = json.loads(extract_json_object(text))
    except ValueError as e:
        logger.error(f"Failed to parse valuation response: {text[:500]!r}")
        raise ValuationProviderError(f"Failed to parse AI analysis response: {e}")

    if not isinstance(data, dict):
        raise ValuationProviderError("Failed to parse AI analysis response: expected a JSON object")

    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise ValuationProviderError(
            f"Missing required fields in AI response: {', '.join(missing)}"
        )

    return data


def normalize_analysis(data: Dict[str, Any]) -> Dict[str, Any]:
    """Garante volume de busca e volumes de keywords diferentes de zero."""
    if not data.get("searchVolume") or data["searchVolume"] in ("0", "0/mo"):
        data["searchVolume"] = DEFAULT_SEARCH_VOLUME

    keywords = data.get("keywordData")
    if isinstance(keywords, list):
        normalized: List[Any] = []
        for keyword in keywords:
            if isinstance(keyword, dict):
                keyword = {**keyword, "volume": keyword.get("volume") or DEFAULT_KEYWORD_VOLUME}
            normalized.append(keyword)
        data["keywordData"] = normalized

    return data


class ValuationClient:
    """
    Cliente para o endpoint de chat completions do provider de valuation.
    """

    def __init__(self):
        self.api_url = settings.LLM_API_URL
        self.api_key = settings.LLM_API_KEY
        self.model = settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE
        self.timeout = settings.LLM_TIMEOUT
        self.max_retries = settings.LLM_MAX_RETRIES

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _make_request(self, payload: Dict[str, Any]) -> requests.Response:
        """
        Faz requisição ao provider com retries exponenciais.
        """
        headers = self._get_headers()
        backoff = 1

        for attempt in range(self.max_retries):
            try:
                response = requests.post(
                    self.api_url, headers=headers, json=payload, timeout=self.timeout
                )

                if response.status_code in (401, 403):
                    logger.error(f"valuation_fail: Unauthorized ({response.status_code})")
                    raise ValuationUnauthorized("Valuation provider rejected the API key")

                if response.status_code == 429:
                    logger.error("valuation_fail: Rate limit (429)")
                    raise ValuationRateLimit("Valuation provider rate limit exceeded. Try again later.")

                if response.status_code >= 500:
                    if attempt < self.max_retries - 1:
                        wait_time = backoff * (2 ** attempt)
                        logger.warning(
                            f"Server error {response.status_code}, retrying in {wait_time}s "
                            f"(attempt {attempt + 1}/{self.max_retries})"
                        )
                        time.sleep(wait_time)
                        continue
                    logger.error(f"valuation_fail: Server error {response.status_code}")
                    raise ValuationProviderError(f"Valuation provider error: {response.status_code}")

                if not response.ok:
                    logger.error(f"valuation_fail: {response.status_code} {response.text[:200]}")
                    raise ValuationProviderError(f"Valuation provider error: {response.status_code}")

                return response

            except ValuationProviderError:
                raise
            except requests.exceptions.Timeout:
                if attempt < self.max_retries - 1:
                    wait_time = backoff * (2 ** attempt)
                    logger.warning(
                        f"Timeout, retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                    continue
                logger.error("valuation_fail: Timeout after retries")
                raise ValuationProviderError("Valuation provider timed out")
            except requests.exceptions.RequestException as e:
                if attempt < self.max_retries - 1:
                    wait_time = backoff * (2 ** attempt)
                    logger.warning(
                        f"Request error, retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries}): {str(e)}"
                    )
                    time.sleep(wait_time)
                    continue
                logger.error(f"valuation_fail: {str(e)}")
                raise ValuationProviderError(f"Valuation provider request failed: {str(e)}")

        raise ValuationProviderError("Valuation provider request failed after all retries")

    def analyze(self, domain_name: str, price_wei: Optional[int] = None) -> Dict[str, Any]:
        """
        Pede a análise do domínio ao LLM.

        Args:
            domain_name: Nome completo do domínio (ex: "example.ai")
            price_wei: Preço conhecido em wei (None pede estimativa)

        Returns:
            dict da análise já validado e normalizado

        Raises:
            ConfigurationError: LLM_API_KEY não configurada
            ValuationProviderError: falha de rede, status não-2xx ou resposta inválida
        """
        if not self.api_key:
            raise ConfigurationError("Valuation provider not configured. Set LLM_API_KEY")

        logger.info(f"Requesting valuation for {domain_name} (model: {self.model})")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": build_prompt(domain_name, price_wei)},
            ],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }

        response = self._make_request(payload)

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            raise ValuationProviderError("Malformed response from valuation provider")

        if not content:
            raise ValuationProviderError("No analysis returned from valuation provider")

        return normalize_analysis(parse_analysis(content))


# Instância global do cliente
_client_instance: Optional[ValuationClient] = None


def get_valuation_client() -> ValuationClient:
    """
    Retorna instância singleton do ValuationClient.
    """
    global _client_instance
    if _client_instance is None:
        _client_instance = ValuationClient()
    return _client_instance
