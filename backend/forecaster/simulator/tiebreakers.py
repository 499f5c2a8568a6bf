"""
Tiebreaker resolution and playoff seeding.

Ranking order:
1. Overall win percentage
2. Head-to-head win% among the tied teams (only if all tied pairs played equal games)
3. Division record (intradivisional win%)
4. Total points for
5. Franchise id (stable fallback so every run seeds identically)

Whenever a step splits a tied group, each resulting subgroup restarts at step 2.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .models import TeamRecord, PlayoffSeed, H2HDict, format_record, safe_ratio
from .league import SYNTHETIC_DIVISION_PREFIX


PLAYOFF_SPOTS = 6

# Rounding applied before comparing ratios / points, so float noise never
# separates teams with identical records.
PCT_PRECISION = 9
POINTS_PRECISION = 2


def get_h2h_record(h2h: H2HDict, team1_id: str, team2_id: str) -> Tuple[int, int, int]:
    """Get head-to-head record for team1 vs team2."""
    key = (min(team1_id, team2_id), max(team1_id, team2_id))
    record = h2h.get(key, (0, 0, 0))

    if team1_id < team2_id:
        return record
    else:
        return (record[1], record[0], record[2])


def combine_h2h(h2h: Optional[H2HDict], sim_h2h: Optional[H2HDict]) -> H2HDict:
    """Add simulated head-to-head results onto the completed ones."""
    h2h = h2h or {}
    if not sim_h2h:
        return h2h
    combined = {}
    for key in set(h2h.keys()) | set(sim_h2h.keys()):
        hist = h2h.get(key, (0, 0, 0))
        sim = sim_h2h.get(key, (0, 0, 0))
        combined[key] = (hist[0] + sim[0], hist[1] + sim[1], hist[2] + sim[2])
    return combined


def _split_by(group: List[TeamRecord], key: Callable[[TeamRecord], float]) -> List[List[TeamRecord]]:
    """Partition a group into subgroups of equal key, best (highest) first."""
    buckets: Dict[float, List[TeamRecord]] = defaultdict(list)
    for team in group:
        buckets[key(team)].append(team)
    return [buckets[k] for k in sorted(buckets, reverse=True)]


def _h2h_pcts(group: List[TeamRecord], h2h: H2HDict) -> Optional[Dict[str, float]]:
    """H2H win% for each team against the rest of the group. None if games are unequal."""
    pair_totals = set()
    for i, t1 in enumerate(group):
        for t2 in group[i + 1:]:
            pair_totals.add(sum(get_h2h_record(h2h, t1.franchise_id, t2.franchise_id)))
    if len(pair_totals) > 1:
        return None

    pcts = {}
    for team in group:
        wins = losses = ties = 0
        for other in group:
            if other.franchise_id == team.franchise_id:
                continue
            w, l, t = get_h2h_record(h2h, team.franchise_id, other.franchise_id)
            wins += w
            losses += l
            ties += t
        pcts[team.franchise_id] = round(
            safe_ratio(wins + 0.5 * ties, wins + losses + ties), PCT_PRECISION
        )
    return pcts


def _resolve(tied: List[TeamRecord], h2h: H2HDict) -> List[TeamRecord]:
    if len(tied) <= 1:
        return list(tied)

    # Step 2: head-to-head among the tied teams
    pcts = _h2h_pcts(tied, h2h)
    if pcts is not None:
        groups = _split_by(tied, lambda t: pcts[t.franchise_id])
        if len(groups) > 1:
            return [team for g in groups for team in _resolve(g, h2h)]

    # Step 3: division record
    groups = _split_by(tied, lambda t: round(t.division_win_pct, PCT_PRECISION))
    if len(groups) > 1:
        return [team for g in groups for team in _resolve(g, h2h)]

    # Step 4: total points for
    groups = _split_by(tied, lambda t: round(t.points_for, POINTS_PRECISION))
    if len(groups) > 1:
        return [team for g in groups for team in _resolve(g, h2h)]

    # Step 5: deterministic fallback
    return sorted(tied, key=lambda t: t.franchise_id)


def resolve_tiebreaker(
    tied_teams: List[TeamRecord],
    h2h: Optional[H2HDict] = None,
    sim_h2h: Optional[H2HDict] = None
) -> List[TeamRecord]:
    """
    Order teams that share the same win percentage.

    Args:
        tied_teams: Teams tied on win percentage
        h2h: Completed head-to-head records
        sim_h2h: Head-to-head results simulated in the current trial

    Returns:
        Teams in ranked order after tiebreaker resolution
    """
    return _resolve(list(tied_teams), combine_h2h(h2h, sim_h2h))


def _rank(teams: Iterable[TeamRecord], h2h: H2HDict) -> List[TeamRecord]:
    groups = _split_by(list(teams), lambda t: round(t.win_pct, PCT_PRECISION))
    ranked = []
    for group in groups:
        ranked.extend(_resolve(group, h2h) if len(group) > 1 else group)
    return ranked


def rank_teams(
    teams: Iterable[TeamRecord],
    h2h: Optional[H2HDict] = None,
    sim_h2h: Optional[H2HDict] = None
) -> List[TeamRecord]:
    """Rank teams best-first by win percentage, breaking ties as described above."""
    return _rank(teams, combine_h2h(h2h, sim_h2h))


@dataclass
class TiebreakDecision:
    """Which of two teams ranks higher and the step that separated them."""

    winner_id: str
    loser_id: str
    reason: str
    step: int


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def decide_tiebreak(
    team_a: TeamRecord,
    team_b: TeamRecord,
    h2h: Optional[H2HDict] = None,
    sim_h2h: Optional[H2HDict] = None
) -> TiebreakDecision:
    """
    Compare two teams with the ranking steps above.

    Gives the same order rank_teams gives the pair. Step 5 is the franchise
    id fallback used when every other step is level.
    """
    combined = combine_h2h(h2h, sim_h2h)

    def decided(winner: TeamRecord, loser: TeamRecord, reason: str, step: int) -> TiebreakDecision:
        return TiebreakDecision(winner.franchise_id, loser.franchise_id, reason, step)

    pct_a, pct_b = round(team_a.win_pct, PCT_PRECISION), round(team_b.win_pct, PCT_PRECISION)
    if pct_a != pct_b:
        winner, loser = (team_a, team_b) if pct_a > pct_b else (team_b, team_a)
        return decided(
            winner, loser,
            f"Better winning percentage ({_pct(winner.win_pct)} vs {_pct(loser.win_pct)})", 1
        )

    wins, losses, ties = get_h2h_record(combined, team_a.franchise_id, team_b.franchise_id)
    if wins != losses:
        winner, loser = (team_a, team_b) if wins > losses else (team_b, team_a)
        record = format_record(max(wins, losses), min(wins, losses), ties)
        return decided(winner, loser, f"Won head-to-head ({record})", 2)

    div_a = round(team_a.division_win_pct, PCT_PRECISION)
    div_b = round(team_b.division_win_pct, PCT_PRECISION)
    if div_a != div_b:
        winner, loser = (team_a, team_b) if div_a > div_b else (team_b, team_a)
        return decided(
            winner, loser,
            f"Better division record ({_pct(winner.division_win_pct)} vs {_pct(loser.division_win_pct)})", 3
        )

    pf_a, pf_b = round(team_a.points_for, POINTS_PRECISION), round(team_b.points_for, POINTS_PRECISION)
    if pf_a != pf_b:
        winner, loser = (team_a, team_b) if pf_a > pf_b else (team_b, team_a)
        return decided(
            winner, loser, f"More total points ({winner.points_for:.2f} vs {loser.points_for:.2f})", 4
        )

    winner, loser = sorted((team_a, team_b), key=lambda t: t.franchise_id)
    return decided(winner, loser, "Completely tied; ordered by franchise id", 5)


def get_tiebreaker_explanation(
    team_a: TeamRecord,
    team_b: TeamRecord,
    h2h: Optional[H2HDict] = None,
    sim_h2h: Optional[H2HDict] = None
) -> str:
    """One line such as "Team A beats Team B: Won head-to-head (2-0)"."""
    decision = decide_tiebreak(team_a, team_b, h2h, sim_h2h)
    names = {t.franchise_id: t.display_name for t in (team_a, team_b)}
    return f"{names[decision.winner_id]} beats {names[decision.loser_id]}: {decision.reason}"


def determine_playoff_seeding(
    teams: Mapping[str, TeamRecord],
    division_map: Mapping[str, str],
    h2h: Optional[H2HDict] = None,
    sim_h2h: Optional[H2HDict] = None,
    playoff_spots: int = PLAYOFF_SPOTS
) -> List[PlayoffSeed]:
    """
    Seed the playoff field from final records.

    Division winners take seeds 1..D in rank order, wildcards fill D+1..K.
    A franchise with no division in `division_map` is its own division.
    Never raises for leagues smaller than the playoff field.

    Args:
        teams: Final team records by franchise id
        division_map: Franchise id -> division id
        h2h: Completed head-to-head records
        sim_h2h: Simulated head-to-head results for this trial
        playoff_spots: Number of playoff spots (K)

    Returns:
        PlayoffSeed list ordered by seed, at most `playoff_spots` long
    """
    combined = combine_h2h(h2h, sim_h2h)

    divisions: Dict[str, List[TeamRecord]] = defaultdict(list)
    for fid, team in teams.items():
        div_id = division_map.get(fid) or f"{SYNTHETIC_DIVISION_PREFIX}{fid}"
        divisions[div_id].append(team)

    winners = []
    for div_id in sorted(divisions):
        winners.append(_rank(divisions[div_id], combined)[0])
    winner_ids = {t.franchise_id for t in winners}

    ranked_winners = _rank(winners, combined)[:playoff_spots]
    wildcard_spots = playoff_spots - len(ranked_winners)
    ranked_wildcards = []
    if wildcard_spots > 0:
        others = [t for t in teams.values() if t.franchise_id not in winner_ids]
        ranked_wildcards = _rank(others, combined)[:wildcard_spots]

    seeds = [
        PlayoffSeed(franchise_id=t.franchise_id, seed=idx + 1, is_division_winner=True)
        for idx, t in enumerate(ranked_winners)
    ]
    offset = len(seeds)
    seeds.extend(
        PlayoffSeed(franchise_id=t.franchise_id, seed=offset + idx + 1, is_division_winner=False)
        for idx, t in enumerate(ranked_wildcards)
    )
    return seeds
