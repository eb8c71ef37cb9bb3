"""
Sistema de Códigos de Erro Estruturados
Traduz erros de domínio em status HTTP e mensagens para usuário e administrador
"""
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from pharmacy_registry.domain.exceptions import DomainError


class ErrorCode:
    """Catálogo de códigos de erro com mensagens para usuário final e administrador"""

    # Sessão & Permissões
    UNAUTHENTICATED = {
        "code": "UNAUTHENTICATED",
        "http_status": 401,
        "retryable": False,
        "admin_msg": "Requisição sem sessão válida (token ausente ou expirado)",
        "user_msg": "Sua sessão expirou. Faça login novamente."
    }

    NO_ACTIVE_TENANT = {
        "code": "NO_ACTIVE_TENANT",
        "http_status": 403,
        "retryable": False,
        "admin_msg": "Sessão sem organização ativa ou usuário fora da organização",
        "user_msg": "Selecione uma organização da qual você faça parte."
    }

    FORBIDDEN = {
        "code": "FORBIDDEN",
        "http_status": 403,
        "retryable": False,
        "admin_msg": "Perfil do usuário não possui a permissão exigida",
        "user_msg": "Seu perfil não tem permissão para esta operação."
    }

    # Validação
    INVALID_DOCUMENT = {
        "code": "INVALID_DOCUMENT",
        "http_status": 422,
        "retryable": False,
        "admin_msg": "CPF/CNPJ com formato ou dígito verificador inválido",
        "user_msg": "CPF ou CNPJ inválido. Confira os números digitados."
    }

    INVALID_INPUT = {
        "code": "INVALID_INPUT",
        "http_status": 422,
        "retryable": False,
        "admin_msg": "Payload fora do formato esperado",
        "user_msg": "Alguns campos estão ausentes ou inválidos."
    }

    # Cadastro de referência
    UNKNOWN_IDENTITY = {
        "code": "UNKNOWN_IDENTITY",
        "http_status": 422,
        "retryable": False,
        "admin_msg": "Documento ou código não existe no cadastro de referência",
        "user_msg": "O documento informado não consta no cadastro oficial."
    }

    INACTIVE_IDENTITY = {
        "code": "INACTIVE_IDENTITY",
        "http_status": 422,
        "retryable": False,
        "admin_msg": "Registro existe no cadastro de referência mas não está ativo",
        "user_msg": "O documento informado está inativo ou suspenso no cadastro oficial."
    }

    # Banco operacional
    NOT_FOUND = {
        "code": "NOT_FOUND",
        "http_status": 404,
        "retryable": False,
        "admin_msg": "Estabelecimento não encontrado",
        "user_msg": "Estabelecimento não encontrado."
    }

    DUPLICATE_ESTABLISHMENT = {
        "code": "DUPLICATE_ESTABLISHMENT",
        "http_status": 409,
        "retryable": False,
        "admin_msg": "CNPJ já cadastrado (chave duplicada)",
        "user_msg": "Este estabelecimento já está cadastrado."
    }

    TRANSPORT_FAILURE = {
        "code": "TRANSPORT_FAILURE",
        "http_status": 503,
        "retryable": True,
        "admin_msg": "Banco indisponível ou tempo limite excedido",
        "user_msg": "Serviço temporariamente indisponível. Tente novamente em alguns instantes."
    }

    CONFLICT_ON_COMMIT = {
        "code": "CONFLICT_ON_COMMIT",
        "http_status": 409,
        "retryable": True,
        "admin_msg": "Falha no commit atômico (rollback executado)",
        "user_msg": "Não foi possível salvar a alteração. Tente novamente."
    }

    # Sistema / Genérico
    INTERNAL_ERROR = {
        "code": "INTERNAL_ERROR",
        "http_status": 500,
        "retryable": False,
        "admin_msg": "Erro não categorizado (exceção genérica)",
        "user_msg": "Ocorreu um erro inesperado. Entre em contato com o suporte."
    }

    @staticmethod
    def get_error(exception_or_code):
        """
        Retorna objeto de erro baseado na exceção ou código.

        Args:
            exception_or_code: Exception object ou string com código (ex: "FORBIDDEN")

        Returns:
            dict com code, http_status, retryable, admin_msg, user_msg
        """
        if isinstance(exception_or_code, str):
            return getattr(ErrorCode, exception_or_code, ErrorCode.INTERNAL_ERROR)

        if isinstance(exception_or_code, DomainError):
            # Subclasses de ValidationError sem código próprio caem em INVALID_INPUT
            if exception_or_code.code.startswith("VALIDATION_ERROR"):
                return ErrorCode.INVALID_INPUT
            return getattr(ErrorCode, exception_or_code.code, ErrorCode.INTERNAL_ERROR)

        if isinstance(exception_or_code, SQLAlchemyError):
            return ErrorCode.TRANSPORT_FAILURE

        return ErrorCode.INTERNAL_ERROR


def error_response(exc: DomainError):
    """JSON body and status for a domain error raised by a request handler."""
    error = ErrorCode.get_error(exc)
    body = {
        "error": exc.code,
        "message": exc.message,
        "retryable": exc.retryable,
    }
    if getattr(exc, "errors", None):
        body["details"] = exc.errors
    if getattr(exc, "field", None):
        body["field"] = exc.field
    return jsonify(body), error["http_status"]
