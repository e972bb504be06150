class VicashError(Exception):
    """Erro base das regras de negócio (traduzido para HTTP nas rotas)."""


class DuplicateEmailError(VicashError):
    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class InvalidSchemaNameError(VicashError):
    def __init__(self, schema_name: str):
        super().__init__(f"Invalid schema name: {schema_name!r}")
        self.schema_name = schema_name


class ProvisioningError(VicashError):
    """Falha ao criar/semear o schema do tenant (tudo foi revertido)."""
