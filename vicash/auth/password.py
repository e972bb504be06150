import bcrypt

# bcrypt só considera os primeiros 72 bytes (versões recentes rejeitam senhas maiores)
MAX_PASSWORD_BYTES = 72

# Hash válido usado quando o email não existe: mantém o custo do bcrypt no
# login para não revelar, pelo tempo de resposta, se a conta existe.
_DUMMY_HASH = bcrypt.hashpw(b"vicash-dummy-password", bcrypt.gensalt())


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Compara a senha com o hash armazenado; sem hash, compara com um hash descartável."""
    candidate = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    try:
        if not password_hash:
            bcrypt.checkpw(candidate, _DUMMY_HASH)
            return False
        return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
    except ValueError:
        # Hash corrompido/formato inesperado no banco
        return False
