from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import MEU_ID
from modelos import KeyMatchup, RoundHistoryEntry

# -------------------- Constantes --------------------
CYCLE_LENGTH = 7
SEM_OPONENTE = -1  # "eu" sem confronto na rodada (histórico completo)


class Pattern(Enum):
    PATTERN_1 = "PATTERN_1"  # clássico: oponente da R4 repete o da R1
    PATTERN_2 = "PATTERN_2"  # novo
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Analysis:
    round: int
    effective_round: int
    pattern: Pattern
    predicted_id: Optional[int]
    tentative: bool = False


# -------------------- Ciclo --------------------
def effective_round(round_num):
    return ((round_num - 1) % CYCLE_LENGTH) + 1


def cycle_start_round(round_num):
    return ((round_num - 1) // CYCLE_LENGTH) * CYCLE_LENGTH + 1


def completed_cycle_history(current_round, history):
    """Entradas do ciclo atual que vieram antes da rodada `current_round`."""
    start = cycle_start_round(current_round)
    return [h for h in history if start <= h.round < current_round]


def _find_entry(cycle_history, eff_round):
    return next((h for h in cycle_history if effective_round(h.round) == eff_round), None)


# -------------------- Padrões --------------------
def detect_pattern(cycle_history):
    """
    Compara o oponente da R4 com o da R1.
    Antes da R4 terminar não há como saber o padrão.
    """
    r1 = _find_entry(cycle_history, 1)
    r4 = _find_entry(cycle_history, 4)
    if r1 is None or r4 is None:
        return Pattern.UNKNOWN
    if r4.my_opponent_id == r1.my_opponent_id:
        return Pattern.PATTERN_1
    return Pattern.PATTERN_2


def predict_with_pattern1(eff_round, cycle_history):
    # R4 = oponente da R1, R5 = oponente da R3
    source = {4: 1, 5: 3}.get(eff_round)
    if source is None:
        return None
    entry = _find_entry(cycle_history, source)
    if entry is None or entry.my_opponent_id == SEM_OPONENTE:
        return None
    return entry.my_opponent_id


# rodada a prever -> rodada onde o jogador-chave foi registrado
_PATTERN2_SOURCES = {5: 4, 6: 2, 7: 3}


def predict_with_pattern2(eff_round, cycle_history):
    """
    O oponente das rodadas 5, 6 e 7 é quem enfrentou o meu oponente da R1
    nas rodadas 4, 2 e 3, respectivamente.
    """
    source = _PATTERN2_SOURCES.get(eff_round)
    if source is None:
        return None
    r1 = _find_entry(cycle_history, 1)
    if r1 is None:
        return None
    entry = _find_entry(cycle_history, source)
    if entry is None or entry.key_matchup is None:
        return None
    if entry.key_matchup.player1_id != r1.my_opponent_id:
        return None
    return entry.key_matchup.player2_id


# -------------------- Previsão --------------------
def analyze(current_round, history) -> Analysis:
    eff = effective_round(current_round)
    cycle_history = completed_cycle_history(current_round, history)
    pattern = detect_pattern(cycle_history)

    tentative = False
    if pattern is Pattern.PATTERN_1:
        predicted = predict_with_pattern1(eff, cycle_history)
    elif pattern is Pattern.PATTERN_2:
        predicted = predict_with_pattern2(eff, cycle_history)
    elif eff == 4:
        # Assume o padrão clássico até o resultado da R4 dizer o contrário
        predicted = predict_with_pattern1(eff, cycle_history)
        tentative = predicted is not None
    else:
        predicted = None

    return Analysis(
        round=current_round,
        effective_round=eff,
        pattern=pattern,
        predicted_id=predicted,
        tentative=tentative,
    )


def predict_opponent_id(current_round, history):
    return analyze(current_round, history).predicted_id


def predict_single_pattern(current_round, history):
    """Motor antigo: só o padrão novo, sem detecção."""
    cycle_history = completed_cycle_history(current_round, history)
    return predict_with_pattern2(effective_round(current_round), cycle_history)


ENGINES = {
    "duplo": predict_opponent_id,
    "simples": predict_single_pattern,
}


# -------------------- Confrontos --------------------
def opponent_map(matchups):
    out = {}
    for m in matchups:
        if m.player1_id == m.player2_id:
            raise ValueError(f"Jogador {m.player1_id} pareado consigo mesmo")
        for a, b in ((m.player1_id, m.player2_id), (m.player2_id, m.player1_id)):
            if a in out:
                raise ValueError(f"Jogador {a} aparece em mais de um confronto na rodada")
            out[a] = b
    return out


def opponent_in_round(matchups, player_id):
    for m in matchups:
        if m.involves(player_id):
            return m.opponent_of(player_id)
    return None


def key_player_for_round(current_round, history):
    """
    Nas rodadas 2, 3 e 4 do ciclo é preciso anotar contra quem jogou o meu
    oponente da R1 (usado depois para prever R6, R7 e R5).
    """
    if effective_round(current_round) not in (2, 3, 4):
        return None
    r1_round = cycle_start_round(current_round)
    r1 = next((h for h in history if h.round == r1_round), None)
    return r1.my_opponent_id if r1 else None


def derive_history(full_history, my_id=MEU_ID):
    """Reduz o histórico completo ao histórico simples usado pela previsão."""
    by_round = {h.round: h for h in full_history}

    def my_opponent(round_num):
        full = by_round.get(round_num)
        if full is None:
            return None
        return opponent_in_round(full.matchups, my_id)

    out = []
    for full in full_history:
        mine = opponent_in_round(full.matchups, my_id)
        eff = effective_round(full.round)
        start = cycle_start_round(full.round)

        key_player = None
        if eff in (2, 4, 6):
            key_player = my_opponent(start)
        elif eff == 5:
            key_player = my_opponent(start + 2)

        key_matchup = None
        if key_player is not None:
            their_opponent = opponent_in_round(full.matchups, key_player)
            if their_opponent is not None:
                key_matchup = KeyMatchup(player1_id=key_player, player2_id=their_opponent)

        out.append(RoundHistoryEntry(
            round=full.round,
            my_opponent_id=mine if mine is not None else SEM_OPONENTE,
            key_matchup=key_matchup,
        ))
    return out
