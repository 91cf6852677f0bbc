from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class InvalidArgumentError(DomainError, ValueError):
    """Parametros invalidos para calculos de posicao."""


class InvalidPriceError(InvalidArgumentError):
    """Preco deve ser um inteiro positivo."""


class InvalidTickError(InvalidArgumentError):
    """Tick ou sqrt price fora dos limites do protocolo."""


class InvalidTickRangeError(InvalidArgumentError):
    """Faixa de ticks invertida ou vazia."""


class InvalidAddressError(InvalidArgumentError):
    """Endereco de token malformado."""


class NotFoundError(DomainError):
    """Dados necessarios para o calculo nao existem."""


class PositionEventsNotFoundError(NotFoundError):
    """Posicao sem eventos registrados."""


class PoolPriceNotFoundError(NotFoundError):
    """Nao foi possivel obter preco atual da pool."""
