from typing import Any, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, OptionList
from textual.widgets.option_list import Option

from .catalogue import entry_value


def describe_entry(entry: Dict[str, Any]) -> str:
    urls = [
        value
        for value in entry_value(entry).values()
        if isinstance(value, str) and "://" in value
    ]
    return f"{entry.get('title', '?')}  {', '.join(urls)}"


class MirrorPicker(App):
    """Full-screen list of catalogue mirrors; exits with the chosen index."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("q", "cancel", "Cancel"),
    ]

    def __init__(self, manager_name: str, entries: List[Dict[str, Any]]):
        super().__init__()
        self.manager_name = manager_name
        self.entries = entries

    def compose(self) -> ComposeResult:
        yield Header()
        yield OptionList(
            *[
                Option(describe_entry(entry), id=str(i))
                for i, entry in enumerate(self.entries)
            ],
            id="mirrors",
        )
        yield Footer()

    def on_mount(self):
        self.title = f"Pick a {self.manager_name} mirror"
        options = self.query_one("#mirrors", OptionList)
        options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option_index)

    def action_cancel(self):
        self.exit(None)


def pick_mirror(manager_name: str, entries: List[Dict[str, Any]]) -> Optional[int]:
    if not entries:
        return None
    return MirrorPicker(manager_name, entries).run()
