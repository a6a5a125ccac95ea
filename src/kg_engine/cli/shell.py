"""
Interactive menu shell.

Keeps one in-memory graph for the whole session and offers the
classic numbered menu: add entity, add relation, display
connections, find path, load, batch input, save, export, exit.
"""

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kg_engine.config import Settings
from kg_engine.core.exceptions import InvalidFieldError, MalformedLineError, StorageError
from kg_engine.graph_store import (
    Entity,
    FuzzyResolver,
    GraphStore,
    PathFinder,
    ResolutionStatus,
)
from kg_engine.storage import export_dot, is_skippable, load_file, parse_triple, save_file
from kg_engine.utils.logging import get_logger

logger = get_logger(__name__)

MENU_ITEMS = [
    "Add Entity (manual)",
    "Add Relationship (manual)",
    "Display Connections (fuzzy)",
    "Find Connection Path (BFS + fuzzy)",
    "Load Graph from File (batch)",
    "Batch Input (N lines: src|rel|tgt)",
    "Save Graph to File",
    "Export Graph to DOT",
    "Exit",
]


def make_prompt_chooser(console: Console):
    """
    Build a chooser that asks the user on the console.

    Returns:
        Callable listing the candidates and returning the typed answer,
        or None when input is exhausted
    """

    def choose(candidates: Sequence[Entity]) -> str | None:
        console.print("\n[yellow]Did you mean:[/yellow]")
        for i, entity in enumerate(candidates, 1):
            console.print(f"  {i:2d}) {escape(entity.name)}")
        try:
            return console.input(f"Choose (1-{len(candidates)}) or 0 to cancel: ")
        except EOFError:
            return None

    return choose


def render_connections(console: Console, entity: Entity, store: GraphStore) -> None:
    """Print the outgoing relations of an entity as a table."""
    relations = store.relations_of(entity)
    if not relations:
        console.print(Panel(
            "[yellow](No outgoing relationships)[/yellow]",
            title=f"Connections of {escape(entity.name)}",
            border_style="blue",
        ))
        return

    table = Table(title=f"Connections of {escape(entity.name)}", show_header=True)
    table.add_column("Target Entity", style="cyan")
    table.add_column("Relationship")
    for relation in relations:
        table.add_row(escape(relation.target.name), escape(relation.label))
    console.print(table)


class GraphShell:
    """
    Menu-driven session over one in-memory graph.

    Example:
        >>> shell = GraphShell(settings, console)
        >>> shell.run()
    """

    def __init__(
        self,
        settings: Settings,
        console: Console,
        store: GraphStore | None = None,
    ) -> None:
        self.settings = settings
        self.console = console
        self.store = store or GraphStore.from_settings(settings)
        self.resolver = FuzzyResolver.from_settings(self.store, settings)
        self.finder = PathFinder(self.store, self.resolver)
        self.chooser = make_prompt_chooser(console)

    def _ask(self, prompt: str) -> str:
        return self.console.input(f"[bold]{prompt}[/bold]")

    def _show_menu(self) -> None:
        lines = [f"[green]{i}.[/green] {item}" for i, item in enumerate(MENU_ITEMS, 1)]
        self.console.print(Panel("\n".join(lines), title="Menu", border_style="blue"))

    def run(self) -> None:
        """Run the menu loop until Exit or end of input."""
        self.console.print(Panel(
            "[bold]Knowledge Graph Engine[/bold]",
            border_style="cyan",
        ))

        handlers = {
            "1": self.add_entity,
            "2": self.add_relation,
            "3": self.display_connections,
            "4": self.find_path,
            "5": self.load,
            "6": self.batch_input,
            "7": self.save,
            "8": self.export,
        }

        while True:
            self._show_menu()
            try:
                choice = self._ask("Enter choice: ").strip()
                if choice == "9":
                    break
                handler = handlers.get(choice)
                if handler is None:
                    self.console.print("[red]Invalid choice. Please try again.[/red]")
                    continue
                handler()
            except EOFError:
                break

        logger.debug(f"Shell session ended: {self.store!r}")
        self.console.print("\n[magenta]Exiting Knowledge Graph Engine... Goodbye![/magenta]")

    def add_entity(self) -> None:
        """Menu 1: add an entity without relations."""
        name = self._ask("Enter entity name: ")
        try:
            entity, created = self.store.add_entity(name)
        except InvalidFieldError as e:
            self.console.print(f"[yellow]⚠ {escape(e.message)}. Skipped.[/yellow]")
            return

        if created:
            self.console.print(f"[green]✔ Entity '{escape(entity.name)}' added.[/green]")
        else:
            self.console.print(f"[yellow]⚠ '{escape(entity.name)}' already exists.[/yellow]")

    def add_relation(self) -> None:
        """Menu 2: prompt for source, label and target and add the relation."""
        source = self._ask("Source entity          : ")
        label = self._ask("Relationship (label)   : ")
        target = self._ask("Target entity          : ")
        self._add(source, label, target)

    def _add(self, source: str, label: str, target: str) -> bool:
        try:
            src, relation = self.store.add_relation(source, label, target)
        except InvalidFieldError as e:
            self.console.print(f"[red]✖ Invalid input: {escape(e.message)}[/red]")
            return False

        self.console.print(
            f"[green]✔ Added:[/green] [cyan]\"{escape(src.name)}\"[/cyan] "
            f"--{escape(relation.label)}--> [cyan]\"{escape(relation.target.name)}\"[/cyan]"
        )
        return True

    def display_connections(self) -> None:
        """Menu 3: resolve an entity fuzzily and list its outgoing relations."""
        query = self._ask("Enter entity to view: ")
        result = self.resolver.resolve(query, chooser=self.chooser)
        if not result.found:
            if result.status == ResolutionStatus.CANCELLED:
                self.console.print("[red]Cancelled selection.[/red]")
            self.console.print("[red]✖ Entity not found.[/red]")
            return
        render_connections(self.console, result.entity, self.store)

    def find_path(self) -> None:
        """Menu 4: print the shortest path between two fuzzily resolved entities."""
        source = self._ask("Enter source entity: ")
        target = self._ask("Enter target entity: ")
        result = self.finder.find_path(source, target, fuzzy=True, chooser=self.chooser)
        if result.found:
            self.console.print(f"\n[green]Path Found ({result.hops} hop(s)):[/green]")
            self.console.print(escape(result.describe()))
        else:
            self.console.print(f"[red]✖ {escape(result.describe())}.[/red]")

    def _ask_path(self, prompt: str, default: Path) -> Path:
        answer = self._ask(f"{prompt} (Enter for default: {escape(str(default))}): ").strip()
        return Path(answer) if answer else default

    def load(self) -> None:
        """Menu 5: merge a triple file into the session graph."""
        path = self._ask_path("Enter filename", self.settings.files.data_file)
        try:
            report = load_file(self.store, path)
        except StorageError as e:
            self.console.print(f"[red]✖ {escape(e.message)}[/red]")
            return

        for line_number, line in report.malformed:
            self.console.print(
                f"[yellow]⚠ Skipping invalid line {line_number}: \"{escape(line)}\"[/yellow]"
            )
        self.console.print(f"[green]{escape(report.summary())}[/green]")

    def batch_input(self) -> None:
        """Menu 6: read N triple lines, asking again for malformed ones."""
        answer = self._ask("How many lines (src|rel|tgt)? ").strip()
        count = int(answer) if answer.isdecimal() else 0
        if count <= 0:
            self.console.print("[yellow]⚠ Nothing to do.[/yellow]")
            return

        i = 1
        while i <= count:
            line = self._ask(f"Line {i} \\[src|rel|tgt]: ")
            if is_skippable(line):
                self.console.print("[yellow]  (skipped)[/yellow]")
                i += 1
                continue
            try:
                triple = parse_triple(line, self.store.max_name_length)
            except MalformedLineError:
                # Ask again for the same line number
                self.console.print("[red]  Invalid format. Use: Source|Relationship|Target[/red]")
                continue
            if self._add(*triple):
                i += 1

    def save(self) -> None:
        """Menu 7: write every relation to a triple file."""
        path = self._ask_path("Enter filename", self.settings.files.data_file)
        try:
            written = save_file(self.store, path)
        except StorageError as e:
            self.console.print(f"[red]✖ {escape(e.message)}[/red]")
            return
        self.console.print(f"[green]Saved {written} relations to '{escape(str(path))}'[/green]")

    def export(self) -> None:
        """Menu 8: write the graph as a Graphviz DOT file."""
        path = self._ask_path("Enter DOT filename", self.settings.files.dot_file)
        try:
            export_dot(self.store, path, self.settings.export)
        except StorageError as e:
            self.console.print(f"[red]✖ {escape(e.message)}[/red]")
            return
        self.console.print(f"[green]✅ DOT file exported to '{escape(str(path))}'[/green]")
        self.console.print(f"[dim]Render with: dot -Tpng -Gdpi=300 {escape(str(path))} -o graph.png[/dim]")
