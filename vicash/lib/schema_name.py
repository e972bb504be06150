"""
Nome de schema PostgreSQL por tenant.

Reutilizar sempre que um identificador de schema for interpolado em SQL:
valores vão por parâmetro, mas identificadores não podem, então passam
obrigatoriamente por `quote_schema()` (allow-list + prefixo fixo).
"""

import re

from vicash.exceptions import InvalidSchemaNameError

SCHEMA_PREFIX = "tenant_"

# Limite de identificadores no PostgreSQL (NAMEDATALEN - 1)
MAX_IDENTIFIER_LENGTH = 63

_INVALID_CHARS = re.compile(r"[^a-z0-9]")
_VALID_SCHEMA_NAME = re.compile(r"^tenant_[a-z0-9_]+$")


def derive_schema_name(value: str) -> str:
    """
    Deriva o nome do schema a partir do nome do tenant (ou parte local do email).

    Determinístico e sem sal: nomes parecidos colidem ("Acme Inc" e "acme-inc"
    geram o mesmo schema). A resolução de colisão fica no provisionamento.

    :param value: Texto informado pelo usuário (pode ser vazio).
    :return: Identificador em minúsculas, ex: "tenant_acme_inc".
    """
    slug = _INVALID_CHARS.sub("_", (value or "").lower())
    return (SCHEMA_PREFIX + slug)[:MAX_IDENTIFIER_LENGTH]


def with_suffix(schema_name: str, n: int) -> str:
    """Variante numerada de um schema (`tenant_acme` -> `tenant_acme_2`) dentro do limite."""
    suffix = f"_{n}"
    return schema_name[: MAX_IDENTIFIER_LENGTH - len(suffix)] + suffix


def is_valid_schema_name(name: str) -> bool:
    if not name or len(name) > MAX_IDENTIFIER_LENGTH:
        return False
    return bool(_VALID_SCHEMA_NAME.match(name))


def quote_schema(name: str) -> str:
    """
    Retorna o identificador entre aspas duplas para uso em DDL.

    Raises:
        InvalidSchemaNameError: Se o nome não passar na allow-list
    """
    if not is_valid_schema_name(name):
        raise InvalidSchemaNameError(name)
    return f'"{name}"'
