from __future__ import annotations

import copy
import logging

from ihl.contracts import AppState, Lineup, LineupCollection
from ihl.core import LineupDefaults, make_id, now_utc
from ihl.lineup.store import normalize

logger = logging.getLogger(__name__)

DEFAULTS = LineupDefaults()


def new_lineup(name: str | None = None, defaults: LineupDefaults = DEFAULTS) -> Lineup:
    stamp = now_utc()
    lineup = Lineup(
        lineup_id=make_id("lineup"),
        name=(name or defaults.name).strip() or defaults.name,
        forward_lines=defaults.forward_lines,
        defence_pairs=defaults.defence_pairs,
        backup_goalie_enabled=defaults.backup_goalie_enabled,
        created_at=stamp,
        updated_at=stamp,
    )
    return normalize(lineup)


def find_lineup(collection: LineupCollection, lineup_id: str | None) -> Lineup | None:
    for lineup in collection.lineups:
        if lineup.lineup_id == lineup_id:
            return lineup
    return None


def active_lineup(collection: LineupCollection) -> Lineup | None:
    found = find_lineup(collection, collection.active_lineup_id)
    if found is not None:
        return found
    return collection.lineups[0] if collection.lineups else None


def ensure_collection(state: AppState, team_id: str, defaults: LineupDefaults = DEFAULTS) -> LineupCollection:
    """Return the team's collection, seeding a first line-up when it is empty."""
    collection = state.lineups_by_team.setdefault(team_id, LineupCollection())
    if not collection.lineups:
        first = new_lineup(defaults.name, defaults)
        collection.lineups.append(first)
        collection.active_lineup_id = first.lineup_id
        logger.info("initialized lineups for team %s with %s", team_id, first.lineup_id)
    elif find_lineup(collection, collection.active_lineup_id) is None:
        collection.active_lineup_id = collection.lineups[0].lineup_id
    return collection


def create_lineup(collection: LineupCollection, name: str | None = None, defaults: LineupDefaults = DEFAULTS) -> Lineup:
    lineup = new_lineup(name or f"Lineup {len(collection.lineups) + 1}", defaults)
    collection.lineups.append(lineup)
    collection.active_lineup_id = lineup.lineup_id
    return lineup


def rename_lineup(collection: LineupCollection, lineup_id: str, name: str) -> bool:
    lineup = find_lineup(collection, lineup_id)
    cleaned = name.strip()
    if lineup is None or not cleaned:
        return False
    lineup.name = cleaned
    lineup.updated_at = now_utc()
    return True


def duplicate_lineup(collection: LineupCollection, lineup_id: str | None = None, name: str | None = None) -> Lineup | None:
    source = find_lineup(collection, lineup_id) if lineup_id else active_lineup(collection)
    if source is None:
        return None
    stamp = now_utc()
    clone = copy.deepcopy(source)
    clone.lineup_id = make_id("lineup")
    clone.name = (name or "").strip() or f"{source.name} (copy)"
    clone.created_at = stamp
    clone.updated_at = stamp
    normalize(clone)
    collection.lineups.insert(collection.lineups.index(source) + 1, clone)
    collection.active_lineup_id = clone.lineup_id
    return clone


def delete_lineup(
    collection: LineupCollection,
    lineup_id: str | None = None,
    defaults: LineupDefaults = DEFAULTS,
) -> Lineup | None:
    """Delete a line-up (the active one by default); the collection never ends up empty."""
    target = find_lineup(collection, lineup_id) if lineup_id else active_lineup(collection)
    if target is None:
        return None
    collection.lineups.remove(target)
    if not collection.lineups:
        fresh = new_lineup(defaults.name, defaults)
        collection.lineups.append(fresh)
    if find_lineup(collection, collection.active_lineup_id) is None:
        collection.active_lineup_id = collection.lineups[0].lineup_id
    logger.info("deleted lineup %s", target.lineup_id)
    return target


def set_active(collection: LineupCollection, lineup_id: str) -> bool:
    if find_lineup(collection, lineup_id) is None:
        return False
    collection.active_lineup_id = lineup_id
    return True
