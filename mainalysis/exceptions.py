"""
Exceções compartilhadas entre serviços
"""


class ConfigurationError(Exception):
    """Chave ou credencial de provider externo não configurada"""
    pass
