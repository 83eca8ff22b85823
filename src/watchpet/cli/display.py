"""Rich terminal display for pets and streaks."""
from __future__ import annotations

from datetime import date

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from watchpet.mechanics.leveling import level_cost
from watchpet.mechanics.mood import MOOD_EMOJI, Mood
from watchpet.mechanics.shield import ShieldRejection, ShieldResult
from watchpet.mechanics.streak import StreakStatus, streak_status
from watchpet.models.config import DEFAULT_CONFIG, PetConfig
from watchpet.models.pet import SPECIES_ICONS, Pet, WatchStreak

console = Console()

_REJECTION_TEXT = {
    ShieldRejection.NOT_FOUND: "There is no pet or streak to shield.",
    ShieldRejection.NOT_ALIVE: "A dead pet cannot shield your streak.",
    ShieldRejection.INSUFFICIENT_RESOURCES: "Your pet does not have enough XP for a shield.",
    ShieldRejection.COOLDOWN: "A shield was used recently. Try again later.",
    ShieldRejection.NOT_ELIGIBLE: "Your streak is not in its grace window.",
}

_STREAK_STYLE = {
    StreakStatus.ACTIVE: "bold orange1",
    StreakStatus.AT_RISK: "yellow",
    StreakStatus.SHIELDABLE: "magenta",
    StreakStatus.LOST: "dim",
}


def _bar(value: int, width: int = 10, invert: bool = False) -> str:
    good = 100 - value if invert else value
    color = "green" if good > 50 else ("yellow" if good > 25 else "red")
    filled = int(value / 100 * width)
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/{color}] {value}"


class Display:
    def __init__(self, width: int = 72, config: PetConfig = DEFAULT_CONFIG):
        self.console = console
        self.width = width
        self.config = config

    def show_pets(self, pets: list[Pet], active_id: str | None) -> None:
        if not pets:
            self.show_info("No pets yet. Adopt one with `watchpet adopt NAME SPECIES`.")
            return
        table = Table(title="Your Pets", box=box.SIMPLE_HEAVY, border_style="cyan")
        table.add_column("", width=2)
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Lvl", justify="right")
        table.add_column("Hunger")
        table.add_column("Happiness")
        for pet in pets:
            marker = "[bold cyan]*[/bold cyan]" if pet.id == active_id else ""
            name = f"{SPECIES_ICONS[pet.species]} {pet.name}"
            if not pet.is_alive:
                name += " [red](dead)[/red]"
            table.add_row(
                marker, pet.id, name, str(pet.level),
                _bar(pet.hunger, invert=True), _bar(pet.happiness),
            )
        self.console.print(table)

    def show_pet(self, pet: Pet, mood: Mood | None = None) -> None:
        table = Table(box=box.SIMPLE, show_header=False)
        table.add_column("Attribute", style="bold", width=14)
        table.add_column("Value")
        cost = level_cost(pet.level, self.config)
        table.add_row("Species", pet.species.value.title())
        table.add_row("Level", f"{pet.level}  [dim]{pet.experience}/{cost} XP[/dim]")
        table.add_row("Hunger", _bar(pet.hunger, invert=True))
        table.add_row("Happiness", _bar(pet.happiness))
        if mood is not None:
            table.add_row("Mood", f"{MOOD_EMOJI[mood]} {mood.value}")
        table.add_row("Favorite", pet.favorite_genre or "-")
        table.add_row("Color", pet.color)
        table.add_row("Episodes", str(pet.episodes_watched))
        table.add_row("Series", str(pet.total_series_watched))
        if pet.accessories:
            items = [
                f"{a.info.icon} {a.id.value}" + (" [green](on)[/green]" if a.equipped else "")
                for a in pet.accessories
            ]
            table.add_row("Accessories", ", ".join(items))
        if pet.unlocked_colors or pet.unlocked_patterns:
            table.add_row("Unlocked", ", ".join(pet.unlocked_colors + pet.unlocked_patterns))
        if not pet.is_alive:
            cause = pet.death_cause.value if pet.death_cause else "unknown"
            table.add_row("Status", f"[bold red]Dead ({cause})[/bold red]")
        if pet.revive_count:
            table.add_row("Revived", f"{pet.revive_count}x")

        title = f"{SPECIES_ICONS[pet.species]} {pet.name}"
        border = "green" if pet.is_alive else "red"
        self.console.print(Panel(table, title=title, border_style=border, box=box.ROUNDED, width=self.width))

    def show_streak(self, streak: WatchStreak | None, today: date) -> None:
        if streak is None:
            self.show_info("No watch streak this year yet.")
            return
        status = streak_status(streak.last_watch_date, today, self.config.max_missed_days)
        style = _STREAK_STYLE[status]
        shown = 0 if status is StreakStatus.LOST else streak.current_streak
        self.console.print(
            f"[{style}]🔥 {shown} day streak[/{style}] "
            f"[dim](best {streak.longest_streak}, {status.value})[/dim]"
        )
        if status is StreakStatus.SHIELDABLE:
            self.console.print("  [magenta]Your pet can still save this streak: `watchpet shield`[/magenta]")

    def show_shield(self, result: ShieldResult) -> None:
        if result.success:
            self.show_success(
                f"Streak saved! {result.pet.name} is now level {result.pet.level} "
                f"with {result.pet.experience} XP."
            )
        else:
            self.show_error(_REJECTION_TEXT[result.reason])

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[bold blue]Info:[/bold blue] {message}")

    def show_success(self, message: str) -> None:
        self.console.print(f"[bold green]{message}[/bold green]")
