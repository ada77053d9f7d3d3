"""
Cliente GraphQL do registry de domínios tokenizados (Doma)
"""
import logging
from typing import Any, Dict, List, Optional
import httpx
from mainalysis.config import settings

logger = logging.getLogger(__name__)

LISTINGS_QUERY = """
query Listings($take: Int, $skip: Int, $tlds: [String!], $sld: String) {
  listings(take: $take, skip: $skip, tlds: $tlds, sld: $sld) {
    currentPage
    hasNextPage
    hasPreviousPage
    items {
      name
      price
      createdAt
      registrar { name }
      chain { name }
    }
    pageSize
    totalPages
  }
}
"""

LISTED_QUERY = """
query Items($sld: String, $tlds: [String!]) {
  listings(sld: $sld, tlds: $tlds) {
    items { name }
  }
}
"""

FRACTIONAL_TOKENS_QUERY = """
query FractionalTokens($take: Int) {
  fractionalTokens(take: $take) {
    currentPage
    hasNextPage
    hasPreviousPage
    items {
      id
      name
      address
      status
      currentPrice
      fractionalizedAt
      fractionalizedBy
      boughtOutAt
      buyoutPrice
      poolAddress
      chain { name }
      metadata { title description image primaryWebsite xLink }
      params { symbol decimals totalSupply initialValuation }
    }
  }
}
"""

WALLET_NAMES_QUERY = """
query Items($ownedBy: [AddressCAIP10!]) {
  names(ownedBy: $ownedBy) {
    items { name }
  }
}
"""


class RegistryError(Exception):
    """Erro de rede ou erro GraphQL do registry"""
    pass


def split_domain(name: str) -> Dict[str, str]:
    """'example.ai' -> {'name': 'example', 'extension': '.ai'}; sem ponto assume '.com'."""
    dot_index = name.find(".")
    if dot_index == -1:
        return {"name": name, "extension": ".com"}
    return {"name": name[:dot_index], "extension": name[dot_index:]}


class RegistryClient:

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = settings.REGISTRY_GRAPHQL_URL
        self.api_key = settings.REGISTRY_API_KEY
        self.chain_id = settings.REGISTRY_CHAIN_ID
        self.timeout = settings.REGISTRY_TIMEOUT
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Api-Key"] = self.api_key
        return headers

    async def _execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """
        Executa a query e retorna o campo "data".

        Raises:
            RegistryError: falha HTTP ou resposta com "errors"
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    headers=self._get_headers(),
                    json={"query": query, "variables": variables},
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"registry_fail: {e}")
            raise RegistryError(f"GraphQL request failed: {e}")
        except ValueError:
            raise RegistryError("GraphQL response is not valid JSON")

        if result.get("errors"):
            message = result["errors"][0].get("message") or "GraphQL request failed"
            logger.error(f"registry_fail: {message}")
            raise RegistryError(message)

        return result.get("data") or {}

    async def fetch_listings(
        self,
        take: int = 20,
        skip: int = 0,
        tlds: Optional[List[str]] = None,
        sld: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Página de domínios listados à venda."""
        variables: Dict[str, Any] = {"take": take, "skip": skip}
        if tlds:
            variables["tlds"] = tlds
        if sld:
            variables["sld"] = sld

        data = await self._execute(LISTINGS_QUERY, variables)
        listings = data.get("listings")
        if listings is None:
            raise RegistryError("GraphQL response missing listings")
        return listings

    async def check_domain_listed(self, domain_name: str, extension: str) -> bool:
        """Indica se o domínio está listado. Erros contam como não listado."""
        tld = extension[1:] if extension.startswith(".") else extension
        try:
            data = await self._execute(LISTED_QUERY, {"sld": domain_name, "tlds": [tld]})
        except RegistryError as e:
            logger.warning(f"Error checking domain listing for {domain_name}{extension}: {e}")
            return False

        items = (data.get("listings") or {}).get("items") or []
        return len(items) > 0

    async def fetch_fractional_tokens(self, take: int = 20) -> List[Dict[str, Any]]:
        data = await self._execute(FRACTIONAL_TOKENS_QUERY, {"take": take})
        return (data.get("fractionalTokens") or {}).get("items") or []

    async def fetch_wallet_domains(self, wallet_address: str) -> List[Dict[str, str]]:
        """Domínios de uma carteira (endereço formatado como CAIP-10)."""
        caip10_address = f"eip155:{self.chain_id}:{wallet_address}"
        data = await self._execute(WALLET_NAMES_QUERY, {"ownedBy": [caip10_address]})

        items = (data.get("names") or {}).get("items") or []
        return [split_domain(item["name"]) for item in items if item.get("name")]


def get_registry_client() -> RegistryClient:
    return RegistryClient()
