from exportar import historico_completo_csv, historico_simples_csv
from modelos import FullRoundHistoryEntry, KeyMatchup, Matchup, RoundHistoryEntry

NOMES = {1: "Você", 2: "Vale", 3: "Karina, a Rainha", 4: "Layla"}


def nome(player_id):
    return NOMES.get(player_id, f"ID: {player_id}")


def test_full_history_one_row_per_matchup():
    historico = [
        FullRoundHistoryEntry(round=1, matchups=(Matchup(1, 2), Matchup(3, 4))),
        FullRoundHistoryEntry(round=2, matchups=(Matchup(1, 3), Matchup(2, 4))),
    ]
    assert historico_completo_csv(historico, nome).splitlines() == [
        "Round,Player 1,Player 2",
        "1,Você,Vale",
        "1,Karina a Rainha,Layla",
        "2,Você,Karina a Rainha",
        "2,Vale,Layla",
    ]


def test_full_history_empty():
    assert historico_completo_csv([], nome) == "Round,Player 1,Player 2\n"


def test_simple_history_with_key_matchup():
    historico = [
        RoundHistoryEntry(round=1, my_opponent_id=2),
        RoundHistoryEntry(round=2, my_opponent_id=4, key_matchup=KeyMatchup(2, 9)),
    ]
    assert historico_simples_csv(historico, nome).splitlines() == [
        "Round,Opponent,Key Player,Key Opponent",
        "1,Vale,,",
        "2,Layla,Vale,ID: 9",
    ]
