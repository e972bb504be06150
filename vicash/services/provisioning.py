from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from vicash.auth.password import hash_password
from vicash.db.session import create_schema, create_tenant_tables, get_session_context, tenant_session
from vicash.exceptions import DuplicateEmailError, ProvisioningError, VicashError
from vicash.lib.schema_name import derive_schema_name, is_valid_schema_name, with_suffix
from vicash.model.tenant import TenantUserRole
from vicash.model.user import User
from vicash.services.category_service import seed_default_categories
from vicash.services.tenant_service import (
    create_tenant_record,
    create_tenant_user_record,
    email_is_registered,
    schema_name_in_use,
)

logger = logging.getLogger(__name__)

# Tentativas de sufixo numérico quando o schema derivado já existe no catálogo
_MAX_SCHEMA_SUFFIX = 1000


@dataclass(frozen=True)
class ProvisionedTenant:
    tenant_id: int
    schema_name: str
    user_id: int
    email: str
    first_name: str | None
    last_name: str | None


def _available_schema_name(session: Session, base: str) -> str:
    """
    Primeiro nome livre no catálogo: `base`, `base_2`, `base_3`, ...

    A constraint única em tenants.schema_name cobre a corrida entre dois
    registros simultâneos (o segundo falha e é revertido).
    """
    if not schema_name_in_use(session, base):
        return base
    for n in range(2, _MAX_SCHEMA_SUFFIX):
        candidate = with_suffix(base, n)
        if not schema_name_in_use(session, candidate):
            return candidate
    raise ProvisioningError(f"No free schema name for {base}")


def provision_tenant(
    *,
    name: str,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
    domain: str | None = None,
) -> ProvisionedTenant:
    """
    Cria o tenant completo em uma única transação (tudo ou nada):

    - valida email duplicado no catálogo
    - deriva o schema (com sufixo se já estiver em uso)
    - cria schema + tabelas do tenant
    - registra Tenant e TenantUser (admin) no catálogo
    - semeia categorias padrão
    - cria o usuário admin com senha bcrypt

    Raises:
        DuplicateEmailError: Se o email já estiver registrado
        ProvisioningError: Qualquer outra falha (nada fica persistido)
    """
    base_schema = derive_schema_name(name)
    if not is_valid_schema_name(base_schema):
        raise ProvisioningError(f"Tenant name produces an invalid schema name: {base_schema!r}")

    with get_session_context() as catalog:
        if email_is_registered(catalog, email):
            raise DuplicateEmailError(email)
        schema_name = _available_schema_name(catalog, base_schema)

    password_hash = hash_password(password)
    logger.info(f"Provisionando tenant name={name!r} schema={schema_name}")

    with tenant_session(schema_name) as session:
        try:
            create_schema(session, schema_name)
            create_tenant_tables(session)

            tenant = create_tenant_record(session, name=name, schema_name=schema_name, domain=domain)
            create_tenant_user_record(session, tenant_id=tenant.id, email=email, role=TenantUserRole.ADMIN)

            seed_default_categories(session)

            user = User(
                email=email,
                password_hash=password_hash,
                first_name=first_name if first_name is not None else name,
                last_name=last_name,
            )
            session.add(user)
            session.flush()

            provisioned = ProvisionedTenant(
                tenant_id=tenant.id,
                schema_name=schema_name,
                user_id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
            )
            session.commit()
        except VicashError:
            session.rollback()
            raise
        except IntegrityError as e:
            session.rollback()
            # Corrida com outro registro do mesmo email/schema entre a checagem e o insert
            with get_session_context() as catalog:
                if email_is_registered(catalog, email):
                    raise DuplicateEmailError(email) from e
            logger.error(f"Erro de integridade ao provisionar tenant schema={schema_name}: {e}", exc_info=True)
            raise ProvisioningError(f"Could not provision tenant {schema_name}") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Erro ao provisionar tenant schema={schema_name}: {e}", exc_info=True)
            raise ProvisioningError(f"Could not provision tenant {schema_name}") from e

    logger.info(f"Tenant provisionado: tenant_id={provisioned.tenant_id} schema={schema_name}")
    return provisioned
