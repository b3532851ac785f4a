import csv
import io
from typing import Callable, Iterable

from modelos import FullRoundHistoryEntry, RoundHistoryEntry

ARQUIVO_COMPLETO = "magic_chess_history.csv"
ARQUIVO_SIMPLES = "magic_chess_previsao.csv"


def _limpar(nome: str) -> str:
    # vírgulas quebram planilhas mais simples
    return nome.replace(",", "")


def historico_completo_csv(historico: Iterable[FullRoundHistoryEntry], nome: Callable[[int], str]) -> str:
    """Uma linha por confronto: Round,Player 1,Player 2."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(["Round", "Player 1", "Player 2"])
    for rodada in historico:
        for m in rodada.matchups:
            writer.writerow([rodada.round, _limpar(nome(m.player1_id)), _limpar(nome(m.player2_id))])
    return out.getvalue()


def historico_simples_csv(historico: Iterable[RoundHistoryEntry], nome: Callable[[int], str]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(["Round", "Opponent", "Key Player", "Key Opponent"])
    for h in historico:
        km = h.key_matchup
        writer.writerow([
            h.round,
            _limpar(nome(h.my_opponent_id)),
            _limpar(nome(km.player1_id)) if km else "",
            _limpar(nome(km.player2_id)) if km else "",
        ])
    return out.getvalue()
