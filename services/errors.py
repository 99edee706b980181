class NotFoundError(ValueError):
    """Registro inexistente ou inativo."""


class InvalidStateError(ValueError):
    """Transição de status não permitida (ex.: aprovar pedido já rejeitado)."""
