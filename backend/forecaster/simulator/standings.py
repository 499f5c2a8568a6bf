"""
Playoff picture: current standings annotated with forecast status.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .league import League
from .models import PlayoffProbabilities, TeamRecord
from .magic_numbers import calculate_games_back
from .tiebreakers import PCT_PRECISION, PLAYOFF_SPOTS, get_tiebreaker_explanation, rank_teams


def playoff_status(playoff_probability: float) -> str:
    if playoff_probability >= 99:
        return "clinched"
    if playoff_probability >= 70:
        return "likely"
    if playoff_probability < 5:
        return "eliminated"
    return "bubble"


@dataclass
class StandingRow:
    franchise_id: str
    name: str
    record: str
    division_id: str
    playoff_probability: float
    status: str
    games_back: float = 0.0

    def to_dict(self) -> dict:
        return {
            "franchise_id": self.franchise_id,
            "name": self.name,
            "record": self.record,
            "division_id": self.division_id,
            "playoff_probability": self.playoff_probability,
            "status": self.status,
            "games_back": self.games_back
        }


@dataclass
class PlayoffPicture:
    standings: List[StandingRow] = field(default_factory=list)
    division_leaders: Dict[str, StandingRow] = field(default_factory=dict)
    wildcard_race: List[StandingRow] = field(default_factory=list)
    cutoff_probability: float = 0.0
    cutoff_explanation: str = ""

    def to_dict(self) -> dict:
        return {
            "standings": [row.to_dict() for row in self.standings],
            "division_leaders": {d: row.to_dict() for d, row in self.division_leaders.items()},
            "wildcard_race": [row.to_dict() for row in self.wildcard_race],
            "cutoff_probability": self.cutoff_probability,
            "cutoff_explanation": self.cutoff_explanation
        }


def get_playoff_picture(
    league: League,
    forecasts: Iterable[PlayoffProbabilities],
    playoff_spots: Optional[int] = None
) -> PlayoffPicture:
    """
    Summarize where every team stands.

    Standings use the same ranking as playoff seeding. The first team of each
    division is its leader; the best remaining teams form the wildcard race.
    The cutoff probability is the forecast of the team currently holding the
    last playoff position in the overall standings. When that team and the
    first team out share a win percentage, the cutoff explanation names the
    tiebreaker that separates them.
    """
    playoff_spots = playoff_spots or PLAYOFF_SPOTS
    probabilities = {f.franchise_id: f.playoff_probability for f in forecasts}
    ranked = rank_teams(league.teams.values(), league.h2h)

    division_leaders: Dict[str, TeamRecord] = {}
    for team in ranked:
        division_leaders.setdefault(league.division_map.get(team.franchise_id, ""), team)

    rows = []
    for team in ranked:
        division_id = league.division_map.get(team.franchise_id, "")
        probability = probabilities.get(team.franchise_id, 0.0)
        rows.append(StandingRow(
            franchise_id=team.franchise_id,
            name=team.display_name,
            record=team.record_str,
            division_id=division_id,
            playoff_probability=probability,
            status=playoff_status(probability),
            games_back=calculate_games_back(team, division_leaders[division_id])
        ))

    leaders: Dict[str, StandingRow] = {}
    for row in rows:
        leaders.setdefault(row.division_id, row)
    leader_ids = {row.franchise_id for row in leaders.values()}

    wildcard_race = [row for row in rows if row.franchise_id not in leader_ids][:playoff_spots]
    cutoff = rows[playoff_spots - 1].playoff_probability if len(rows) >= playoff_spots else 0.0

    explanation = ""
    if len(ranked) > playoff_spots:
        last_in, first_out = ranked[playoff_spots - 1], ranked[playoff_spots]
        if round(last_in.win_pct, PCT_PRECISION) == round(first_out.win_pct, PCT_PRECISION):
            explanation = get_tiebreaker_explanation(last_in, first_out, league.h2h)

    return PlayoffPicture(
        standings=rows,
        division_leaders=leaders,
        wildcard_race=wildcard_race,
        cutoff_probability=cutoff,
        cutoff_explanation=explanation
    )
