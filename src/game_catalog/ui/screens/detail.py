"""Detail screen for a single catalog game."""

from typing import ClassVar

from typing_extensions import override

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import Static

from rich.text import Text

from ...models.game import GameEntry

from .base import BaseScreen


def render_details(entry: GameEntry) -> list[tuple[str, str]]:
    """Label/value rows shown under the title, skipping empty fields."""
    rows = [
        ("Rating", entry.formatted_rating),
        ("Genre", entry.genre_string or "-"),
        ("Released", entry.formatted_release_date),
    ]
    if entry.developer:
        rows.append(("Developer", entry.developer))
    if entry.tags:
        rows.append(("Tags", ", ".join(entry.tags)))
    if entry.official_website:
        rows.append(("Website", entry.official_website))
    for link in entry.download_links:
        rows.append((f"Download ({link.platform})", link.url))
    if entry.has_screenshots:
        rows.append(("Screenshots", str(len(entry.screenshots))))
    return rows


def detail_row_text(label: str, value: str) -> Text:
    """A bold label followed by the value, which is never parsed as markup."""
    return Text.assemble((f"{label}: ", "bold"), value)


class GameDetailScreen(BaseScreen):
    SCREEN_TITLE: ClassVar[str] = "Game Details"
    SCREEN_NAME: ClassVar[str] = "detail"

    CSS: ClassVar[str] = """
    #detail-container {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    .detail-row {
        margin-bottom: 0;
    }

    #detail-description {
        margin-top: 1;
    }

    .requirements {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, entry: GameEntry) -> None:
        super().__init__()
        self.entry = entry

    @override
    def compose(self) -> ComposeResult:
        with Container(id="detail-container"):
            yield self.create_title_widget(self.entry.title)
            with VerticalScroll():
                for label, value in render_details(self.entry):
                    yield Static(detail_row_text(label, value), classes="detail-row")
                yield Static(
                    self.entry.full_description or "No description available.",
                    id="detail-description",
                    markup=False,
                )
                requirements = self.entry.system_requirements
                if requirements is not None:
                    if requirements.minimum:
                        yield Static(f"Minimum: {requirements.minimum}", classes="requirements", markup=False)
                    if requirements.recommended:
                        yield Static(f"Recommended: {requirements.recommended}", classes="requirements", markup=False)
