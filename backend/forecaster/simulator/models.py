"""
Data models for the playoff forecaster.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, coercing a zero denominator to 0.0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def format_record(wins: int, losses: int, ties: int = 0) -> str:
    """Format a record as W-L, or W-L-T when there are ties."""
    if ties > 0:
        return f"{wins}-{losses}-{ties}"
    return f"{wins}-{losses}"


class GameResult(str, Enum):
    """Outcome of one game from a team's point of view."""
    WIN = "W"
    LOSS = "L"
    TIE = "T"


@dataclass
class TeamRecord:
    """A franchise's record and scoring totals."""

    franchise_id: str
    name: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    division_wins: int = 0
    division_losses: int = 0
    division_ties: int = 0
    recent_results: List[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.franchise_id

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def record_str(self) -> str:
        return format_record(self.wins, self.losses, self.ties)

    @property
    def division_record_str(self) -> str:
        return f"{self.division_wins}-{self.division_losses}-{self.division_ties}"

    @property
    def win_pct(self) -> float:
        return safe_ratio(self.wins + 0.5 * self.ties, self.games_played)

    @property
    def division_win_pct(self) -> float:
        total = self.division_wins + self.division_losses + self.division_ties
        return safe_ratio(self.division_wins + 0.5 * self.division_ties, total)

    @property
    def avg_points_for(self) -> float:
        return safe_ratio(self.points_for, self.games_played)

    def copy(self) -> 'TeamRecord':
        """Create a copy of this record for one simulated trial."""
        return TeamRecord(
            franchise_id=self.franchise_id,
            name=self.name,
            wins=self.wins,
            losses=self.losses,
            ties=self.ties,
            points_for=self.points_for,
            points_against=self.points_against,
            division_wins=self.division_wins,
            division_losses=self.division_losses,
            division_ties=self.division_ties,
            recent_results=list(self.recent_results)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "franchise_id": self.franchise_id,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "division_wins": self.division_wins,
            "division_losses": self.division_losses,
            "division_ties": self.division_ties,
            "record": self.record_str,
            "division_record": self.division_record_str,
            "win_pct": self.win_pct,
            "division_win_pct": self.division_win_pct
        }


@dataclass(frozen=True)
class RemainingGame:
    """One unplayed game on a franchise's schedule."""

    week: int
    opponent_id: str
    is_home: bool = False


MatchupKey = Tuple[int, FrozenSet[str]]


@dataclass(frozen=True)
class Matchup:
    """A single real-world game between two franchises."""

    home_team_id: str
    away_team_id: str
    week: int
    is_division_game: bool = False

    @property
    def key(self) -> MatchupKey:
        return (self.week, frozenset((self.home_team_id, self.away_team_id)))

    def involves(self, franchise_id: str) -> bool:
        return franchise_id in (self.home_team_id, self.away_team_id)

    def opponent_of(self, franchise_id: str) -> str:
        return self.away_team_id if franchise_id == self.home_team_id else self.home_team_id

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "week": self.week,
            "is_division_game": self.is_division_game
        }


@dataclass
class Division:
    """A division and its member franchises."""

    id: str
    name: str
    member_ids: List[str] = field(default_factory=list)
    synthetic: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "member_ids": list(self.member_ids),
            "synthetic": self.synthetic
        }


@dataclass(frozen=True)
class PlayoffSeed:
    """A qualifying franchise and its playoff seed."""

    franchise_id: str
    seed: int
    is_division_winner: bool

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "seed": self.seed,
            "is_division_winner": self.is_division_winner
        }


@dataclass
class ProbabilityAccumulator:
    """Per-franchise tallies for a single Monte Carlo run."""

    franchise_id: str
    playoff_spots: int = 6
    playoff_count: int = 0
    division_win_count: int = 0
    wildcard_count: int = 0
    seed_counts: List[int] = field(default_factory=list)
    seed_sum: int = 0

    def __post_init__(self):
        if not self.seed_counts:
            self.seed_counts = [0] * self.playoff_spots

    def record(self, seed: PlayoffSeed) -> None:
        """Tally one trial in which this franchise was seeded."""
        self.playoff_count += 1
        if seed.is_division_winner:
            self.division_win_count += 1
        else:
            self.wildcard_count += 1
        if 1 <= seed.seed <= len(self.seed_counts):
            self.seed_counts[seed.seed - 1] += 1
            self.seed_sum += seed.seed

    def merge(self, other: 'ProbabilityAccumulator') -> None:
        """Fold another worker's tallies for the same franchise into this one."""
        if other.franchise_id != self.franchise_id:
            raise ValueError(
                f"Cannot merge tallies for {other.franchise_id} into {self.franchise_id}"
            )
        self.playoff_count += other.playoff_count
        self.division_win_count += other.division_win_count
        self.wildcard_count += other.wildcard_count
        self.seed_sum += other.seed_sum
        for idx, count in enumerate(other.seed_counts):
            self.seed_counts[idx] += count


@dataclass
class PlayoffProbabilities:
    """Forecast for one franchise."""

    franchise_id: str
    playoff_probability: float = 0.0
    division_win_probability: float = 0.0
    wildcard_probability: float = 0.0
    seed_probabilities: List[float] = field(default_factory=list)
    average_seed: float = 0.0
    magic_number: int = 99
    elimination_number: int = 0
    clinch_scenarios: List[str] = field(default_factory=list)
    is_eliminated: bool = False
    elimination_reason: str = ""
    elimination_details: List[str] = field(default_factory=list)
    clinched_division: bool = False
    eliminated_from_division: bool = False
    division_magic_number: Optional[int] = None  # None when the title is out of the team's own hands

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "playoff_probability": self.playoff_probability,
            "division_win_probability": self.division_win_probability,
            "wildcard_probability": self.wildcard_probability,
            "seed_probabilities": list(self.seed_probabilities),
            "average_seed": self.average_seed,
            "magic_number": self.magic_number,
            "elimination_number": self.elimination_number,
            "clinch_scenarios": list(self.clinch_scenarios),
            "is_eliminated": self.is_eliminated,
            "elimination_reason": self.elimination_reason,
            "elimination_details": list(self.elimination_details),
            "clinched_division": self.clinched_division,
            "eliminated_from_division": self.eliminated_from_division,
            "division_magic_number": self.division_magic_number
        }


@dataclass
class ScenarioResult:
    """A deterministic best / worst / most-likely projection."""

    record: str
    seed: int
    probability: float
    description: str
    playoff_probability: float

    def to_dict(self) -> dict:
        return {
            "record": self.record,
            "seed": self.seed,
            "probability": self.probability,
            "description": self.description,
            "playoff_probability": self.playoff_probability
        }


@dataclass
class CustomScenarioResult:
    """Projection for a user-specified set of game results."""

    playoff_probability: float
    projected_record: str
    projected_seed: int

    def to_dict(self) -> dict:
        return {
            "playoff_probability": self.playoff_probability,
            "projected_record": self.projected_record,
            "projected_seed": self.projected_seed
        }


# Type aliases for head-to-head records
H2HRecord = Tuple[int, int, int]  # (lower_id_wins, higher_id_wins, ties)
H2HDict = Dict[Tuple[str, str], H2HRecord]
