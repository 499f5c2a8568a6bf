"""
League snapshot construction.

Turns the standings, remaining schedules and division map supplied by the
data-fetch layer into an immutable League: one deduplicated matchup list,
one division per franchise, and a list of non-fatal warnings.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Union

from .models import Division, H2HDict, Matchup, MatchupKey, RemainingGame, TeamRecord


logger = logging.getLogger(__name__)

SYNTHETIC_DIVISION_PREFIX = "__independent__"


@dataclass
class League:
    """Validated, read-only inputs shared by every simulated trial."""

    teams: Dict[str, TeamRecord]
    divisions: Dict[str, Division]
    division_map: Dict[str, str]
    matchups: List[Matchup]
    h2h: H2HDict = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    scheduled_ids: Set[str] = field(default_factory=set)

    @property
    def num_divisions(self) -> int:
        return len(self.divisions)

    def division_of(self, franchise_id: str) -> Optional[Division]:
        division_id = self.division_map.get(franchise_id)
        return self.divisions.get(division_id) if division_id is not None else None

    def remaining_games(self, franchise_id: str) -> List[Matchup]:
        """Unplayed matchups involving a franchise, in week order."""
        games = [m for m in self.matchups if m.involves(franchise_id)]
        return sorted(games, key=lambda m: m.week)

    def remaining_count(self, franchise_id: str) -> int:
        return sum(1 for m in self.matchups if m.involves(franchise_id))

    def replace_state(
        self,
        teams: Dict[str, TeamRecord],
        matchups: List[Matchup],
        h2h: H2HDict
    ) -> 'League':
        """Return a League sharing divisions and warnings with new records and games."""
        return League(
            teams=teams,
            divisions=self.divisions,
            division_map=self.division_map,
            matchups=matchups,
            h2h=h2h,
            warnings=list(self.warnings),
            scheduled_ids=set(self.scheduled_ids)
        )


def _warn(warnings: List[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)


def build_league(
    standings: Union[Mapping[str, TeamRecord], Iterable[TeamRecord]],
    schedules: Mapping[str, List[RemainingGame]],
    division_map: Mapping[str, str],
    division_names: Optional[Mapping[str, str]] = None,
    h2h: Optional[H2HDict] = None,
    season_length: Optional[int] = None,
    num_divisions: Optional[int] = None
) -> League:
    """
    Build a League from external standings, schedule and division data.

    Args:
        standings: Team records, keyed by franchise id or as a list
        schedules: Franchise id -> remaining games for that franchise
        division_map: Franchise id -> division id
        division_names: Division id -> display name. When given, division ids
            missing from it are treated as unknown.
        h2h: Completed head-to-head records
        season_length: Games per team, used only to flag impossible records
        num_divisions: Expected division count; a mismatch is only flagged

    Returns:
        League ready for simulation. Problems with the inputs never raise;
        they are logged and listed in ``league.warnings``.
    """
    warnings: List[str] = []

    if isinstance(standings, Mapping):
        teams = {fid: team for fid, team in standings.items()}
    else:
        teams = {team.franchise_id: team for team in standings}

    # Divisions
    divisions: Dict[str, Division] = {}
    resolved_map: Dict[str, str] = {}
    for fid, team in teams.items():
        div_id = division_map.get(fid)
        known = div_id is not None and (division_names is None or div_id in division_names)
        if not known:
            div_id = f"{SYNTHETIC_DIVISION_PREFIX}{fid}"
            divisions[div_id] = Division(
                id=div_id,
                name=f"{team.display_name} (Independent)",
                member_ids=[fid],
                synthetic=True
            )
            _warn(warnings, f"Franchise {fid} has no known division; placed in its own division")
        elif div_id not in divisions:
            name = (division_names or {}).get(div_id, f"Division {div_id}")
            divisions[div_id] = Division(id=div_id, name=name, member_ids=[fid])
        else:
            divisions[div_id].member_ids.append(fid)
        resolved_map[fid] = div_id

    if num_divisions is not None and len(divisions) != num_divisions:
        _warn(
            warnings,
            f"League has {len(divisions)} divisions but {num_divisions} were configured; "
            f"seeding uses the league's divisions"
        )

    # Deduplicate shared games
    matchups: List[Matchup] = []
    seen: Dict[MatchupKey, Matchup] = {}
    for fid, games in schedules.items():
        if fid not in teams:
            _warn(warnings, f"Schedule references unknown franchise {fid}; its games were skipped")
            continue
        for game in games:
            if game.opponent_id not in teams:
                _warn(
                    warnings,
                    f"Week {game.week}: opponent {game.opponent_id} of {fid} is not in the standings; game skipped"
                )
                continue
            if game.opponent_id == fid:
                _warn(warnings, f"Week {game.week}: franchise {fid} is scheduled against itself; game skipped")
                continue

            key = (game.week, frozenset((fid, game.opponent_id)))
            if key in seen:
                continue

            home, away = (fid, game.opponent_id) if game.is_home else (game.opponent_id, fid)
            matchup = Matchup(
                home_team_id=home,
                away_team_id=away,
                week=game.week,
                is_division_game=resolved_map[home] == resolved_map[away]
            )
            seen[key] = matchup
            matchups.append(matchup)

    scheduled_ids = {fid for fid in schedules if fid in teams}
    for fid in teams:
        if fid not in scheduled_ids:
            _warn(warnings, f"No schedule found for franchise {fid}; only games listed by opponents are simulated")

    if season_length is not None:
        remaining = defaultdict(int)
        for m in matchups:
            remaining[m.home_team_id] += 1
            remaining[m.away_team_id] += 1
        for fid, team in teams.items():
            if team.games_played + remaining[fid] > season_length:
                _warn(
                    warnings,
                    f"Franchise {fid} has {team.games_played} played and {remaining[fid]} remaining "
                    f"games, more than the {season_length}-game season"
                )

    return League(
        teams=teams,
        divisions=divisions,
        division_map=resolved_map,
        matchups=matchups,
        h2h=dict(h2h or {}),
        warnings=warnings,
        scheduled_ids=scheduled_ids
    )
