"""Script para iniciar o servidor FastAPI (porta via PORT, padrão 5000)."""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "vicash.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        reload=os.getenv("RELOAD", "true").lower() == "true",
    )


if __name__ == "__main__":
    main()
