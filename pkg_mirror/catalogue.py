from importlib import resources
from typing import Any, Dict, List

from ruamel.yaml import YAML


def load_catalogue() -> Dict[str, List[Dict[str, Any]]]:
    text = resources.files("pkg_mirror").joinpath("catalogue.yaml").read_text()
    return YAML(typ="safe").load(text) or {}


def catalogue_entries(manager_name: str) -> List[Dict[str, Any]]:
    return list(load_catalogue().get(manager_name) or [])


def entry_value(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Config value of a catalogue entry, i.e. everything but its title."""
    return {key: value for key, value in entry.items() if key != "title"}
