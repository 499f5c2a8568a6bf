"""
Pydantic schemas for API request/response validation.
"""

from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, Field

from ..core.config import SimulationConfig
from ..simulator import League, RemainingGame, TeamRecord, build_league


# ============== League Schemas ==============

class TeamStanding(BaseModel):
    """One franchise's current record."""
    franchise_id: str = Field(..., min_length=1, max_length=50)
    name: str = ""
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    ties: int = Field(default=0, ge=0)
    points_for: float = Field(default=0.0, ge=0)
    points_against: float = Field(default=0.0, ge=0)
    division_wins: int = Field(default=0, ge=0)
    division_losses: int = Field(default=0, ge=0)
    division_ties: int = Field(default=0, ge=0)
    recent_results: List[Literal["W", "L", "T"]] = []  # oldest first

    def to_record(self) -> TeamRecord:
        return TeamRecord(**self.model_dump())


class ScheduledGame(BaseModel):
    """One unplayed game from a franchise's point of view."""
    week: int = Field(..., ge=1)
    opponent_id: str = Field(..., min_length=1, max_length=50)
    is_home: bool = False


class HeadToHead(BaseModel):
    """Completed head-to-head record between two franchises."""
    team1_id: str
    team2_id: str
    team1_wins: int = Field(default=0, ge=0)
    team2_wins: int = Field(default=0, ge=0)
    ties: int = Field(default=0, ge=0)


class LeaguePayload(BaseModel):
    """Standings, remaining schedules and divisions supplied by the caller."""
    teams: List[TeamStanding] = Field(..., min_length=1)
    schedules: Dict[str, List[ScheduledGame]] = {}
    division_map: Dict[str, str] = {}
    division_names: Optional[Dict[str, str]] = None
    head_to_head: List[HeadToHead] = []

    def h2h_dict(self) -> dict:
        h2h: dict = {}
        for record in self.head_to_head:
            low, high = sorted((record.team1_id, record.team2_id))
            if record.team1_id == low:
                wins = (record.team1_wins, record.team2_wins)
            else:
                wins = (record.team2_wins, record.team1_wins)
            prev = h2h.get((low, high), (0, 0, 0))
            h2h[(low, high)] = (prev[0] + wins[0], prev[1] + wins[1], prev[2] + record.ties)
        return h2h

    def to_league(self, season_length: Optional[int] = None, num_divisions: Optional[int] = None) -> League:
        return build_league(
            [t.to_record() for t in self.teams],
            {
                fid: [RemainingGame(**g.model_dump()) for g in games]
                for fid, games in self.schedules.items()
            },
            self.division_map,
            division_names=self.division_names,
            h2h=self.h2h_dict(),
            season_length=season_length,
            num_divisions=num_divisions
        )


# ============== Simulation Schemas ==============

class SimulationOptions(BaseModel):
    """Per-request overrides of the server's simulation settings."""
    n_simulations: Optional[int] = Field(default=None, ge=1, le=100000)
    playoff_spots: Optional[int] = Field(default=None, ge=1, le=32)
    recent_form_weeks: Optional[int] = Field(default=None, ge=1, le=20)
    win_probability_jitter: Optional[float] = Field(default=None, ge=0, lt=1)
    point_jitter: Optional[float] = Field(default=None, ge=0, lt=1)
    season_length: Optional[int] = Field(default=None, ge=1)
    num_divisions: Optional[int] = Field(default=None, ge=1, le=32)
    workers: Optional[int] = Field(default=None, ge=1, le=16)
    residual_simulations: Optional[int] = Field(default=None, ge=0, le=100000)
    seed: Optional[int] = None  # reproducible runs
    time_budget: Optional[float] = Field(default=None, gt=0)  # seconds

    def apply(self, config: SimulationConfig) -> SimulationConfig:
        return config.with_overrides(
            **self.model_dump(exclude={"seed", "time_budget"})
        )


class SimulationRunRequest(BaseModel):
    """Run a Monte Carlo forecast for a league."""
    league: LeaguePayload
    options: SimulationOptions = Field(default_factory=SimulationOptions)


class TeamForecast(BaseModel):
    """Forecast for a single franchise."""
    franchise_id: str
    name: str
    division_id: str
    division_name: str
    record: str
    division_record: str
    win_pct: float
    remaining_games: int
    playoff_probability: float
    division_win_probability: float
    wildcard_probability: float
    seed_probabilities: List[float]
    average_seed: float
    magic_number: int
    elimination_number: int
    clinch_scenarios: List[str]
    is_eliminated: bool
    elimination_reason: str
    elimination_details: List[str]
    clinched_division: bool
    eliminated_from_division: bool
    division_magic_number: Optional[int]  # None when the title is out of the team's own hands
    schedule_strength: float
    schedule_difficulty: str


class StandingRowResponse(BaseModel):
    franchise_id: str
    name: str
    record: str
    division_id: str
    playoff_probability: float
    status: str  # clinched, likely, bubble, eliminated
    games_back: float


class PlayoffPictureResponse(BaseModel):
    standings: List[StandingRowResponse]
    division_leaders: Dict[str, StandingRowResponse]
    wildcard_race: List[StandingRowResponse]
    cutoff_probability: float
    cutoff_explanation: str = ""


class SimulationResultsResponse(BaseModel):
    """Full forecast response."""
    n_simulations: int
    trials_completed: int
    cancelled: bool = False
    playoff_spots: int
    teams: List[TeamForecast]
    playoff_picture: PlayoffPictureResponse
    warnings: List[str] = []


# ============== Scenario Schemas ==============

class ScenarioRequest(BaseModel):
    """Project best / worst / most likely outcomes for a franchise."""
    league: LeaguePayload
    options: SimulationOptions = Field(default_factory=SimulationOptions)


class ScenarioResponse(BaseModel):
    record: str
    seed: int  # 0 when out of the playoffs
    probability: float
    description: str
    playoff_probability: float


class ScenariosResponse(BaseModel):
    franchise_id: str
    best_case: ScenarioResponse
    worst_case: ScenarioResponse
    most_likely: ScenarioResponse
    warnings: List[str] = []


class CustomScenarioRequest(BaseModel):
    """Fix some of a franchise's remaining games by week."""
    league: LeaguePayload
    game_results: Dict[int, Optional[Literal["W", "L"]]] = {}
    options: SimulationOptions = Field(default_factory=SimulationOptions)


class CustomScenarioResponse(BaseModel):
    franchise_id: str
    playoff_probability: float
    projected_record: str
    projected_seed: int
    warnings: List[str] = []


class RootingRequest(BaseModel):
    """Rank other matchups by their effect on a franchise's odds."""
    league: LeaguePayload
    n_simulations: int = Field(default=500, ge=1, le=10000)
    options: SimulationOptions = Field(default_factory=SimulationOptions)


class RootingInterestResponse(BaseModel):
    week: int
    team_a_id: str
    team_b_id: str
    root_for: str
    importance: str  # critical, important, moderate, minor
    if_root_for_wins: float
    if_root_for_loses: float
    swing: float
    explanation: str
    context: str


class RootingResponse(BaseModel):
    franchise_id: str
    top_matchups: List[RootingInterestResponse]
    all_matchups: List[RootingInterestResponse]
    certainty_level: str  # high, medium, low
    weekly_breakdown: Dict[int, List[RootingInterestResponse]]
    warnings: List[str] = []


# ============== Error Schemas ==============

class ErrorResponse(BaseModel):
    """API error response."""
    detail: str
    code: Optional[str] = None
