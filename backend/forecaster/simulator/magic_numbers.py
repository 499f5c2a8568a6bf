"""
Magic numbers, elimination numbers and clinch text.

Magic number = additional wins that guarantee a playoff berth.
Elimination number = additional losses that guarantee missing the playoffs.
Both use 0 / 99 as sentinels once a team has clinched or is out.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from .league import League
from .models import TeamRecord, format_record


PLAYOFF_SPOTS = 6
SENTINEL = 99
CLINCHED_PCT = 99.9
ELIMINATED_PCT = 1.0
SEASON_COMPLETE_TEXT = "Season complete - depends on other results"


def effective_wins(team: TeamRecord) -> float:
    return team.wins + 0.5 * team.ties


def calculate_magic_number(
    franchise_id: str,
    league: League,
    playoff_probability: float,
    playoff_spots: int = PLAYOFF_SPOTS
) -> int:
    """
    Wins needed to guarantee finishing ahead of the bubble team.

    The bubble team is the `playoff_spots`-th best of the other franchises
    ranked by maximum possible wins: once the subject has more wins than it
    can reach, at most K-1 teams can finish ahead.
    """
    if playoff_probability >= CLINCHED_PCT:
        return 0

    team = league.teams.get(franchise_id)
    if team is None:
        return SENTINEL

    remaining = league.remaining_count(franchise_id)
    if playoff_probability < ELIMINATED_PCT or remaining == 0:
        return SENTINEL

    others_max = sorted(
        (other.wins + league.remaining_count(fid)
         for fid, other in league.teams.items() if fid != franchise_id),
        reverse=True
    )
    if len(others_max) < playoff_spots:
        return 0

    bubble_max_wins = others_max[playoff_spots - 1]
    wins_needed = max(0, bubble_max_wins + 1 - team.wins)
    return min(wins_needed, remaining)


def calculate_elimination_number(
    franchise_id: str,
    league: League,
    playoff_probability: float,
    playoff_spots: int = PLAYOFF_SPOTS
) -> int:
    """
    Losses after which the subject can no longer catch the last qualifier.

    The last qualifier is the `playoff_spots`-th best of the other franchises
    by current wins; their wins can only grow, so once the subject's maximum
    falls below them K teams are guaranteed to finish ahead.
    """
    if playoff_probability >= CLINCHED_PCT:
        return SENTINEL

    team = league.teams.get(franchise_id)
    if team is None:
        return 0

    remaining = league.remaining_count(franchise_id)
    if playoff_probability < ELIMINATED_PCT or remaining == 0:
        return 0

    others_wins = sorted(
        (other.wins for fid, other in league.teams.items() if fid != franchise_id),
        reverse=True
    )
    if len(others_wins) < playoff_spots:
        return SENTINEL

    cutoff_wins = others_wins[playoff_spots - 1]
    max_wins = team.wins + remaining
    losses_until_elimination = max(0, max_wins - cutoff_wins + 1)
    return min(losses_until_elimination, remaining)


def calculate_games_back(team: TeamRecord, leader: TeamRecord) -> float:
    """Games behind the division leader: half the win gap plus half the loss gap."""
    return ((leader.wins - team.wins) + (team.losses - leader.losses)) / 2


def _division_rivals(franchise_id: str, league: League) -> List[TeamRecord]:
    division = league.division_of(franchise_id)
    if division is None:
        return []
    return [league.teams[fid] for fid in division.member_ids if fid != franchise_id]


def _max_wins(team: TeamRecord, league: League) -> int:
    return team.wins + league.remaining_count(team.franchise_id)


def has_clinched_division(franchise_id: str, league: League) -> bool:
    """True once no division rival can reach the team's current win total."""
    team = league.teams.get(franchise_id)
    if team is None:
        return False
    return all(_max_wins(rival, league) < team.wins for rival in _division_rivals(franchise_id, league))


def is_eliminated_from_division(franchise_id: str, league: League) -> bool:
    """True once a division rival already has more wins than the team can reach."""
    team = league.teams.get(franchise_id)
    if team is None:
        return False
    max_wins = _max_wins(team, league)
    return any(rival.wins > max_wins for rival in _division_rivals(franchise_id, league))


def calculate_division_magic_number(franchise_id: str, league: League) -> Optional[int]:
    """
    Wins needed to guarantee the division title.

    Measured against the rival with the most current wins. Returns 0 once
    clinched (or alone in the division) and None when the team cannot clinch
    on its own results.
    """
    team = league.teams.get(franchise_id)
    if team is None:
        return None

    rivals = _division_rivals(franchise_id, league)
    if not rivals:
        return 0

    threat = max(rivals, key=lambda r: r.wins)
    magic_number = _max_wins(threat, league) - team.wins + 1
    if magic_number <= 0:
        return 0
    if magic_number > league.remaining_count(franchise_id):
        return None
    return magic_number


def generate_clinch_scenarios(
    playoff_probability: float,
    division_win_probability: float,
    magic_number: int,
    elimination_number: int,
    remaining_games: int
) -> List[str]:
    """Human-readable clinching text for a team's probability bracket."""
    scenarios = []

    if playoff_probability >= CLINCHED_PCT:
        if division_win_probability >= CLINCHED_PCT:
            scenarios.append("Clinched division title!")
        else:
            scenarios.append("Clinched playoff spot!")
        if remaining_games > 0:
            prefix = "division title and " if division_win_probability < CLINCHED_PCT else ""
            scenarios.append(f"Playing for {prefix}seeding")
        return scenarios

    if playoff_probability < ELIMINATED_PCT:
        scenarios.append("Eliminated from playoff contention")
        return scenarios

    if remaining_games == 0:
        scenarios.append(SEASON_COMPLETE_TEXT)
        return scenarios

    # Very likely
    if playoff_probability >= 80:
        if 0 < magic_number < SENTINEL:
            unit = "game" if magic_number == 1 else "games"
            scenarios.append(f"Magic number: {magic_number} (win {magic_number} {unit} to clinch)")
        if division_win_probability >= 50:
            scenarios.append("Leading division race")
        wins_needed = math.ceil(remaining_games * 0.4)
        if wins_needed > 0:
            scenarios.append(f"Win {wins_needed} of next {remaining_games} games to secure spot")
        return scenarios

    # Likely
    if playoff_probability >= 50:
        wins_needed = math.ceil(remaining_games * 0.6)
        scenarios.append(f"Win {wins_needed} of {remaining_games} remaining games")
        if division_win_probability >= 30:
            scenarios.append("In division race - key games ahead")
        else:
            scenarios.append("Competing for wildcard spot")
        return scenarios

    # Bubble
    if playoff_probability >= 20:
        wins_needed = math.ceil(remaining_games * 0.75)
        scenarios.append(f"Must win {wins_needed} of {remaining_games} remaining games")
        scenarios.append("Need help from other teams")
        if 0 < elimination_number < SENTINEL:
            unit = "loss" if elimination_number == 1 else "losses"
            scenarios.append(f"Warning: {elimination_number} {unit} eliminates")
        return scenarios

    # Long shot
    if remaining_games > 0:
        scenarios.append(f"Must win out ({remaining_games} games)")
        scenarios.append("Requires multiple upsets by other teams")
    if elimination_number == 1:
        scenarios.append("Warning: any loss eliminates")
    return scenarios


@dataclass
class EliminationCheck:
    """Deterministic elimination verdict with its reasoning."""

    is_eliminated: bool
    reason: str = ""
    details: List[str] = field(default_factory=list)


def is_mathematically_eliminated(
    franchise_id: str,
    league: League,
    playoff_spots: int = PLAYOFF_SPOTS
) -> EliminationCheck:
    """
    Check whether a team can still reach the playoffs by any path.

    Division path: closed once a division rival already has more wins than
    the team can reach. Wildcard path: closed once enough non-division-winners
    are guaranteed to finish ahead to fill every wildcard slot. A tie on the
    final record still counts as alive.
    """
    team = league.teams.get(franchise_id)
    if team is None:
        return EliminationCheck(is_eliminated=True, reason="Team not found")

    remaining = league.remaining_count(franchise_id)
    max_wins = effective_wins(team) + remaining
    best_record = format_record(team.wins + remaining, team.losses, team.ties)

    details = [
        f"Current record: {team.record_str}",
        f"Best possible record: {best_record}",
        f"Remaining games: {remaining}",
    ]

    division = league.division_of(franchise_id)
    division_name = division.name if division else "Unknown Division"
    rivals = [
        league.teams[fid] for fid in (division.member_ids if division else [])
        if fid != franchise_id
    ]

    can_win_division = True
    leader = max(rivals, key=effective_wins, default=None)
    if leader is not None and effective_wins(leader) > max_wins:
        can_win_division = False
        details.append(
            f"Cannot catch division leader {leader.display_name} "
            f"({effective_wins(leader):g} wins vs best possible {max_wins:g})"
        )

    # Teams guaranteed to finish ahead in the overall standings
    ahead = [
        other for fid, other in league.teams.items()
        if fid != franchise_id and effective_wins(other) > max_wins
    ]
    division_winners = min(
        playoff_spots, len({league.division_map.get(o.franchise_id) for o in ahead})
    )
    wildcard_slots = max(0, playoff_spots - league.num_divisions)
    # At most one guaranteed-ahead team per division can be a division winner
    wildcards_ahead = len(ahead) - division_winners
    can_get_wildcard = wildcard_slots > 0 and wildcards_ahead < wildcard_slots

    details.append(f"Division path: {'Still possible' if can_win_division else 'Eliminated'}")
    details.append(f"Wildcard path: {'Still possible' if can_get_wildcard else 'Eliminated'}")
    details.append(f"Teams definitely ahead in wildcard: {max(0, wildcards_ahead)}")

    is_eliminated = not can_win_division and not can_get_wildcard
    reason = ""
    if is_eliminated:
        leader_wins = effective_wins(leader) if leader is not None else 0
        reason = (
            f"Cannot win {division_name} (leader has {leader_wins:g}+ wins) and "
            f"{max(0, wildcards_ahead)} wildcard teams have clinched ahead"
        )

    return EliminationCheck(is_eliminated=is_eliminated, reason=reason, details=details)
