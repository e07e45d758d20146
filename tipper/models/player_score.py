from dataclasses import dataclass


@dataclass
class PlayerScore:
    """Leaderboard row for one player. Built fresh on every calculation."""

    player_id: str
    name: str
    color: str
    score: int = 0
    counter_bet_points: int = 0
    total_score: int = 0
    correct_masks: int = 0
    won_counter_bets: int = 0

    def __repr__(self):
        return (
            f"<PlayerScore {self.name} masks={self.correct_masks} "
            f"bets={self.won_counter_bets} total={self.total_score}>"
        )

    @property
    def rank_key(self):
        """Sort key: correct masks, then won counter-bets, then total points"""
        return (-self.correct_masks, -self.won_counter_bets, -self.total_score)

    def to_dict(self):
        return {
            "playerId": self.player_id,
            "name": self.name,
            "color": self.color,
            "score": self.score,
            "counterBetPoints": self.counter_bet_points,
            "totalScore": self.total_score,
            "correctMasks": self.correct_masks,
            "wonCounterBets": self.won_counter_bets,
        }
