import os
from typing import Optional

# ---------------- Constantes do jogo ----------------
MEU_ID = 1
NOME_MEU = "Você"
TOTAL_JOGADORES = 8

# ---------------- Tempos de espera (segundos) ----------------
TIMEOUT_MENSAGEM = 120
TIMEOUT_VIEW = 180


def _int_env(nome: str) -> Optional[int]:
    valor = os.environ.get(nome)
    if not valor:
        return None
    try:
        return int(valor)
    except ValueError:
        raise ValueError(f"❌ ERRO: {nome} deve ser um número (recebido: {valor!r})")


def carregar_token() -> str:
    token = os.environ.get("DISCORD_TOKEN")
    if not token:
        raise ValueError("❌ ERRO: Token do bot não encontrado!")
    return token


def canal_log() -> Optional[int]:
    return _int_env("CANAL_LOG")


def servidor_teste() -> Optional[int]:
    return _int_env("SERVIDOR_TESTE")
