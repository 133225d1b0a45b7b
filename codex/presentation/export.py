"""
Export — Names and FunctionCallGraph as flat JSON for the presentation layer

Keys are hash text; graph edges are sorted lists. Output is byte-identical
for the same snapshot (sorted keys, sorted edges).
"""

from typing import Dict, List, Mapping

import orjson

from ..core.graph import FunctionCallGraph
from ..core.references import Hash


def names_payload(display_names: Mapping[Hash, str]) -> Dict[str, str]:
    return {h.value: text for h, text in display_names.items()}


def graph_payload(graph: FunctionCallGraph) -> Dict[str, List[str]]:
    return {h.value: sorted(t.value for t in targets) for h, targets in graph.items()}


def _dumps(payload, pretty: bool) -> bytes:
    option = orjson.OPT_SORT_KEYS
    if pretty:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(payload, option=option)


def names_to_json(display_names: Mapping[Hash, str], pretty: bool = True) -> bytes:
    return _dumps(names_payload(display_names), pretty)


def graph_to_json(graph: FunctionCallGraph, pretty: bool = True) -> bytes:
    return _dumps(graph_payload(graph), pretty)
