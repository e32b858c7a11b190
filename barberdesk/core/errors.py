"""Erros de domínio da agenda.

Cada erro carrega um código estável (``code``) usado na resposta JSON da API e
pelo cliente para reconstruir a mesma exceção do lado de quem chamou.
"""


class DomainError(Exception):
    code = "domain_error"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(DomainError):
    """Entidade referenciada não existe."""

    code = "not_found"
    status_code = 404


class InvalidSchedule(DomainError):
    """Data no passado, fora do expediente ou janela de horário malformada."""

    code = "invalid_schedule"
    status_code = 400


class Conflict(DomainError):
    """Horário sobreposto ou registro duplicado."""

    code = "conflict"
    status_code = 409


class InvalidState(DomainError):
    """Operação incompatível com o status atual do agendamento."""

    code = "invalid_state"
    status_code = 400


ERRORS_BY_CODE = {
    cls.code: cls for cls in (NotFound, InvalidSchedule, Conflict, InvalidState)
}
