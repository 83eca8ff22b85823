"""Typer CLI application."""
from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich.logging import RichHandler

from watchpet.errors import PetError

app = typer.Typer(
    name="watchpet",
    help="Raise a pet that grows with every episode you watch.",
    no_args_is_help=True,
)


class _Session:
    def __init__(self, user: str, db_path: str | None) -> None:
        from watchpet.app import PetApp
        from watchpet.cli.display import Display

        self.user = user
        self.app = PetApp(db_path=db_path)
        self.display = Display(
            width=self.app.config.get("display", {}).get("width", 72),
            config=self.app.pet_config,
        )

    @property
    def manager(self):
        return self.app.manager

    def pet_id(self, pet: str | None) -> str:
        pet_id = pet or self.manager.get_active_companion(self.user)
        if pet_id is None:
            self.display.show_error("No active pet. Adopt one first or pass --pet.")
            raise typer.Exit(1)
        return pet_id


def _session(ctx: typer.Context) -> _Session:
    return ctx.obj


def _fail(session: _Session, exc: PetError) -> None:
    session.display.show_error(str(exc))
    raise typer.Exit(1)


PetOption = typer.Option(None, "--pet", "-p", help="Pet ID (defaults to the active pet)")


@app.callback()
def main(
    ctx: typer.Context,
    user: str = typer.Option("me", "--user", "-u", envvar="WATCHPET_USER", help="User ID"),
    db: Optional[str] = typer.Option(None, "--db", help="Path to the SQLite database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log output"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    ctx.obj = _Session(user, db)
    ctx.call_on_close(ctx.obj.app.close)


@app.command("list")
def list_pets(ctx: typer.Context) -> None:
    """List your pets."""
    s = _session(ctx)
    try:
        pets = s.manager.list_companions(s.user)
        s.display.show_pets(pets, s.manager.get_active_companion(s.user))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def show(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Show a pet's stats."""
    s = _session(ctx)
    try:
        pet_id = s.pet_id(pet)
        found = s.manager.get_companion(s.user, pet_id)
        if found is None:
            s.display.show_error(f"No pet {pet_id!r}.")
            raise typer.Exit(1)
        s.display.show_pet(found, s.manager.get_mood(s.user, pet_id))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def adopt(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Your pet's name"),
    species: str = typer.Argument(..., help="cat, dog, bird, dragon or fox"),
) -> None:
    """Adopt a new pet."""
    s = _session(ctx)
    try:
        pet = s.manager.create_companion(s.user, name, species.lower())
    except PetError as exc:
        _fail(s, exc)
    s.display.show_success(f"Welcome home, {pet.name}! (id: {pet.id})")


@app.command()
def feed(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Feed a pet."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.feed(s.user, s.pet_id(pet)))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def play(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Play with a pet."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.play(s.user, s.pet_id(pet)))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def watch(
    ctx: typer.Context,
    genre: List[str] = typer.Option([], "--genre", "-g", help="Genre of the episode (repeatable)"),
    all_pets: bool = typer.Option(False, "--all", "-a", help="Credit every pet"),
    pet: Optional[str] = PetOption,
) -> None:
    """Record a watched episode."""
    s = _session(ctx)
    try:
        if all_pets:
            pets = s.manager.record_episode_watched_all(s.user, genre)
            s.display.show_pets(pets, s.manager.get_active_companion(s.user))
        else:
            s.display.show_pet(s.manager.record_episode_watched(s.user, s.pet_id(pet), genre))
        s.app.streaks.record_watch(s.user, s.manager.clock().date())
    except PetError as exc:
        _fail(s, exc)


@app.command("series-done")
def series_done(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Record a finished series."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.record_series_completed(s.user, s.pet_id(pet)))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def revive(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Bring a dead pet back (costs one level)."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.revive(s.user, s.pet_id(pet)))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def release(ctx: typer.Context, pet: str = typer.Argument(..., help="Pet ID")) -> None:
    """Delete a pet for good."""
    s = _session(ctx)
    try:
        s.manager.delete_companion(s.user, pet)
    except PetError as exc:
        _fail(s, exc)
    s.display.show_info(f"Released {pet}.")


@app.command()
def activate(ctx: typer.Context, pet: str = typer.Argument(..., help="Pet ID")) -> None:
    """Choose which pet is shown by default."""
    s = _session(ctx)
    try:
        s.manager.set_active_companion(s.user, pet)
    except PetError as exc:
        _fail(s, exc)
    s.display.show_success(f"{pet} is now your active pet.")


@app.command()
def accessory(
    ctx: typer.Context,
    accessory_id: str = typer.Argument(..., help="Accessory ID, e.g. crown"),
    pet: Optional[str] = PetOption,
) -> None:
    """Put on or take off an unlocked accessory."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.toggle_accessory(s.user, s.pet_id(pet), accessory_id))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def color(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Base color or an unlocked special color"),
    pet: Optional[str] = PetOption,
) -> None:
    """Change a pet's color."""
    s = _session(ctx)
    try:
        s.display.show_pet(s.manager.change_color(s.user, s.pet_id(pet), key))
    except PetError as exc:
        _fail(s, exc)


@app.command()
def shield(ctx: typer.Context, pet: Optional[str] = PetOption) -> None:
    """Spend pet XP to save a broken watch streak."""
    s = _session(ctx)
    try:
        result = s.manager.activate_streak_shield(s.user, s.pet_id(pet))
    except PetError as exc:
        _fail(s, exc)
    s.display.show_shield(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def streak(ctx: typer.Context) -> None:
    """Show this year's watch streak."""
    s = _session(ctx)
    today = s.manager.clock().date()
    try:
        s.display.show_streak(s.app.streaks.get(s.user, today.year), today)
    except PetError as exc:
        _fail(s, exc)


if __name__ == "__main__":
    app()
