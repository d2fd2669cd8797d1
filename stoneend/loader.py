"""
Content loading: level and item files from YAML.

A content file either loads completely or raises ContentError with every
problem found in it. Syntax errors point at the offending line and column.
"""
import logging

import yaml

from stoneend.atlas import Coord
from stoneend.catalog import ITEM_VARIANTS, ItemCatalog
from stoneend.errors import ContentError
from stoneend.world import VERBS, World

logger = logging.getLogger(__name__)

# Lines of context shown above a YAML syntax error.
BACKSCROLL = 10


def load_yaml(path):
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise ContentError(f"Could not load {path}: {e.strerror}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ContentError(render_yaml_error(path, text, e)) from e


def load_text(path):
    try:
        with open(path, "r") as f:
            return f.read()
    except OSError as e:
        raise ContentError(f"Could not load {path}: {e.strerror}") from e


def render_yaml_error(path, text, error):
    lines = ["=" * 56, f"Unable to deserialize: {path}"]
    mark = getattr(error, 'problem_mark', None)
    if mark is None:
        lines.append(str(error))
        return "\n".join(lines)

    lines.append("=" * 56)
    source = text.splitlines()
    start = max(0, mark.line - BACKSCROLL + 1)
    lines.extend(source[start:mark.line + 1])
    lines.append(" " * mark.column + f"^ {getattr(error, 'problem', None) or error}")
    return "\n".join(lines)


def load_catalog(path):
    data = load_yaml(path)
    issues = check_catalog_data(data, path)
    if issues:
        raise ContentError(issues)
    catalog = ItemCatalog.from_data(data)
    logger.debug("Loaded %d catalog items from %s", len(catalog), path)
    return catalog


def load_world(path):
    data = load_yaml(path)
    issues = check_level_data(data, path)
    if issues:
        raise ContentError(issues)
    world = World(data)
    logger.debug("Loaded %d rooms from %s", len(world.rooms), path)
    return world


# ==========================================================
# STRUCTURE CHECKS
# ==========================================================
def _expect(data, key, kind, where, issues, required=True):
    """True when data[key] is present and of the right type; records an issue otherwise."""
    value = data.get(key)
    if value is None:
        if required:
            issues.append(f"{where}: missing '{key}'.")
        return False
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        issues.append(f"{where}: '{key}' should be {kind.__name__}, got {type(value).__name__}.")
        return False
    return True


def _expect_strings(data, key, where, issues, required=False):
    if _expect(data, key, list, where, issues, required=required):
        if not all(isinstance(s, str) for s in data[key]):
            issues.append(f"{where}: every entry of '{key}' should be a string.")


def _expect_count(data, key, where, issues, required=False):
    if _expect(data, key, int, where, issues, required=required) and data[key] < 0:
        issues.append(f"{where}: '{key}' cannot be negative.")


def _expect_coord(data, key, where, issues):
    if key not in data:
        issues.append(f"{where}: missing '{key}'.")
        return
    try:
        Coord.from_state(data[key])
    except ValueError as e:
        issues.append(f"{where}: {e}")


def check_catalog_data(data, path):
    if not isinstance(data, list):
        return [f"{path}: the item catalog should be a list of items."]

    issues = []
    seen = set()
    for index, item in enumerate(data):
        where = f"{path}: item #{index}"
        if not isinstance(item, dict):
            issues.append(f"{where} should be a mapping.")
            continue
        if _expect(item, 'id', str, where, issues):
            where = f"{path}: item {item['id']!r}"
            if item['id'] in seen:
                issues.append(f"{where} is defined more than once.")
            seen.add(item['id'])
        _expect(item, 'name', str, where, issues)
        _expect(item, 'description', str, where, issues)
        _expect_strings(item, 'targets', where, issues)
        _expect(item, 'sticky', bool, where, issues, required=False)
        _expect_count(item, 'quantity', where, issues)
        _expect_count(item, 'max_quantity', where, issues)
        if item.get('variant') not in ITEM_VARIANTS:
            issues.append(f"{where}: 'variant' must be one of {', '.join(ITEM_VARIANTS)}, got {item.get('variant')!r}.")
    return issues


def check_action_data(action, where, issues):
    if not isinstance(action, dict):
        issues.append(f"{where} should be a mapping.")
        return
    if action.get('verb') not in VERBS:
        issues.append(f"{where}: 'verb' must be one of {', '.join(VERBS)}, got {action.get('verb')!r}.")
    _expect_strings(action, 'targets', where, issues, required=True)
    _expect(action, 'value', str, where, issues)


def check_level_data(data, path):
    if not isinstance(data, dict):
        return [f"{path}: the level should be a mapping."]

    issues = []
    if _expect(data, 'maps', list, path, issues):
        for z, layer in enumerate(data['maps']):
            if not isinstance(layer, list) or not all(isinstance(row, str) for row in layer):
                issues.append(f"{path}: map layer {z} should be a list of strings.")
    _expect_coord(data, 'entry', path, issues)

    if _expect(data, 'npcs', dict, path, issues, required=False):
        for npc_id, npc in data['npcs'].items():
            where = f"{path}: npc {npc_id!r}"
            if not isinstance(npc, dict):
                issues.append(f"{where} should be a mapping.")
                continue
            _expect(npc, 'name', str, where, issues)
            _expect(npc, 'description', str, where, issues)
            _expect(npc, 'talk', str, where, issues, required=False)
            _expect_strings(npc, 'targets', where, issues)
            if _expect(npc, 'items', list, where, issues, required=False):
                for sale in npc['items']:
                    if not isinstance(sale, dict):
                        issues.append(f"{where}: sale items should be mappings.")
                        continue
                    _expect(sale, 'id', str, f"{where} sale item", issues)
                    _expect_count(sale, 'cost', f"{where} sale item", issues, required=True)

    if _expect(data, 'regions', dict, path, issues, required=False):
        for region_id, region in data['regions'].items():
            where = f"{path}: region {region_id!r}"
            if not isinstance(region, dict):
                issues.append(f"{where} should be a mapping.")
                continue
            if _expect(region, 'actions', list, where, issues, required=False):
                for index, action in enumerate(region['actions']):
                    check_action_data(action, f"{where} action #{index}", issues)

    if _expect(data, 'rooms', list, path, issues):
        for index, room in enumerate(data['rooms']):
            check_room_data(room, f"{path}: room #{index}", issues)
    return issues


def check_room_data(room, where, issues):
    if not isinstance(room, dict):
        issues.append(f"{where} should be a mapping.")
        return
    if isinstance(room.get('title'), str):
        where = f"{where} ({room['title']})"
    _expect(room, 'title', str, where, issues)
    _expect(room, 'description', str, where, issues)
    _expect_coord(room, 'coord', where, issues)
    _expect_strings(room, 'npcs', where, issues)
    _expect_strings(room, 'regions', where, issues)

    if _expect(room, 'actions', list, where, issues, required=False):
        for index, action in enumerate(room['actions']):
            check_action_data(action, f"{where} action #{index}", issues)

    if _expect(room, 'items', list, where, issues, required=False):
        for index, stub in enumerate(room['items']):
            stub_where = f"{where} item #{index}"
            if not isinstance(stub, dict):
                issues.append(f"{stub_where} should be a mapping.")
                continue
            _expect(stub, 'id', str, stub_where, issues)
            _expect_count(stub, 'quantity', stub_where, issues, required=True)
            _expect(stub, 'name', str, stub_where, issues, required=False)
            _expect(stub, 'pickup', str, stub_where, issues, required=False)
            _expect_strings(stub, 'targets', stub_where, issues)
