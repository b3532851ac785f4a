from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Player:
    id: int
    name: str


@dataclass(frozen=True)
class KeyMatchup:
    player1_id: int  # jogador-chave
    player2_id: int  # oponente dele na rodada


@dataclass(frozen=True)
class RoundHistoryEntry:
    round: int
    my_opponent_id: int
    key_matchup: Optional[KeyMatchup] = None


@dataclass(frozen=True)
class Matchup:
    player1_id: int
    player2_id: int

    def involves(self, player_id: int) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def opponent_of(self, player_id: int) -> Optional[int]:
        if player_id == self.player1_id:
            return self.player2_id
        if player_id == self.player2_id:
            return self.player1_id
        return None


@dataclass(frozen=True)
class FullRoundHistoryEntry:
    """Pareamento completo de todos os jogadores numa rodada."""
    round: int
    matchups: Tuple[Matchup, ...] = field(default_factory=tuple)
