from functools import wraps

from flask import abort, request
from flask_login import current_user

from models.user import Role


def require_roles(*allowed_roles):
    """Valida:

    - Usuário autenticado e ativo
    - Operador de filial precisa estar vinculado a uma filial
    - Rol permitido
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)

            if current_user.role == Role.BRANCH_OPERATOR and current_user.branch_id is None:
                abort(403, description="Operador sem filial vinculada. Contate o administrador.")

            if current_user.role not in allowed_roles:
                abort(403, description="Você não tem permissão para acessar esta seção.")

            return fn(*args, **kwargs)

        return wrapper

    return decorator


def scoped_branch_id(requested_branch_id: int | None = None) -> int | None:
    """
    Operador de filial: força a própria filial.
    Admin: usa a filial pedida ou None (todas).
    """
    if current_user.role == Role.BRANCH_OPERATOR:
        return current_user.branch_id
    return requested_branch_id or None


def requested_branch_id() -> int | None:
    return request.args.get("branch_id", type=int)
