from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from heroledger.config import resolve_data_dir, resolve_dice_seed
from heroledger.config_env import load_env
from heroledger.engine import (
    BenefitRemover,
    LevelUpOptions,
    apply_feat,
    apply_origin,
    apply_species,
    create_character,
    equip_item,
    level_up,
    level_up_preview,
    long_rest,
    remove_feat,
    short_rest,
    unequip_item,
)
from heroledger.engine.multiclass import available_multiclass_options, prerequisite_text
from heroledger.errors import CharacterFileError, RulesError
from heroledger.logging import set_verbose
from heroledger.rng import SeededDiceRoller
from heroledger.rules.tables import RuleTables
from heroledger.sheet import render_console, save_markdown
from heroledger.storage import load_character, save_character

app = typer.Typer(no_args_is_help=True, help="heroledger - D&D 5e character rules engine")
feat_app = typer.Typer(help="Add or remove feats")
app.add_typer(feat_app, name="feat")


def _tables(ctx: typer.Context) -> RuleTables:
    return ctx.obj["tables"]


def _fail(e: Exception) -> None:
    typer.secho(str(e), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from e


def _load(path: Path):
    try:
        return load_character(path)
    except CharacterFileError as e:
        _fail(e)


@app.callback()
def _root(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(None, help="Rule table directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every granted and reverted benefit"),
):
    set_verbose(verbose)
    ctx.obj = {"tables": RuleTables(resolve_data_dir(data_dir))}


@app.command("create")
def create(
    ctx: typer.Context,
    name: str = typer.Option(...),
    class_: str = typer.Option(..., "--class", help="Class, e.g. Wizard"),
    species: str = typer.Option(None),
    origin: str = typer.Option(None, help="Origin (background)"),
    origin_ability: str = typer.Option(None, help="Ability raised by the origin"),
    str_: int = typer.Option(10, "--str"),
    dex: int = typer.Option(10, "--dex"),
    con: int = typer.Option(10, "--con"),
    int_: int = typer.Option(10, "--int"),
    wis: int = typer.Option(10, "--wis"),
    cha: int = typer.Option(10, "--cha"),
    skill: List[str] = typer.Option([], "--skill", help="Class skill choice (repeatable)"),
    out: Path = typer.Option(Path("character.json"), help="Output file"),
):
    abilities = {"str": str_, "dex": dex, "con": con, "int": int_, "wis": wis, "cha": cha}
    try:
        c = create_character(
            _tables(ctx),
            name,
            class_,
            abilities,
            options=LevelUpOptions(selected_skills=skill),
            species=species,
            origin=origin,
            origin_ability=origin_ability,
        )
    except RulesError as e:
        _fail(e)
    save_character(c, out)
    typer.secho(f"Created {c.name} ({c.class_summary}) → {out}", fg=typer.colors.GREEN)


@app.command("level-up")
def level_up_cmd(
    ctx: typer.Context,
    path: Path,
    class_: str = typer.Option(..., "--class"),
    roll: bool = typer.Option(False, help="Roll hit points instead of taking the average"),
    seed: Optional[int] = typer.Option(None, help="Dice seed"),
    subclass: str = typer.Option(None),
    fighting_style: str = typer.Option(None),
    skill: List[str] = typer.Option([], "--skill"),
    preview: bool = typer.Option(False, help="Report what the level would bring without saving"),
):
    try:
        c = load_character(path)
        if preview:
            res = level_up_preview(c, _tables(ctx), class_)
        else:
            opts = LevelUpOptions(
                take_average=not roll,
                selected_skills=skill,
                subclass=subclass,
                fighting_style=fighting_style,
            )
            res = level_up(c, _tables(ctx), class_, opts, roller=SeededDiceRoller(resolve_dice_seed(seed)))
    except (RulesError, CharacterFileError) as e:
        _fail(e)
    if not preview:
        save_character(c, path)
    typer.secho(
        f"{res.class_name} {res.new_class_level} (level {res.new_total_level}), +{res.hp_gained} HP",
        fg=typer.colors.GREEN,
    )
    if res.features_gained:
        typer.echo("Features: " + ", ".join(res.features_gained))
    for flag, msg in (
        (res.requires_subclass, "choose a subclass"),
        (res.requires_skills, "choose class skills"),
        (res.requires_spells, "choose spells"),
        (res.requires_asi, "choose an ability score improvement or feat"),
    ):
        if flag:
            typer.secho(f"Pending: {msg}", fg=typer.colors.YELLOW)


@app.command("multiclass")
def multiclass_cmd(ctx: typer.Context, path: Path):
    """List classes the character qualifies for."""
    c = _load(path)
    for cls in available_multiclass_options(c, _tables(ctx)):
        typer.echo(f"{cls.name} ({prerequisite_text(cls.name)})")


@feat_app.command("add")
def feat_add(ctx: typer.Context, path: Path, name: str, ability: str = typer.Option(None)):
    try:
        c = load_character(path)
        apply_feat(c, _tables(ctx), name, chosen_ability=ability)
    except (RulesError, CharacterFileError) as e:
        _fail(e)
    save_character(c, path)
    typer.secho(f"Added feat {name}", fg=typer.colors.GREEN)


@feat_app.command("remove")
def feat_remove(path: Path, name: str):
    c = _load(path)
    if not remove_feat(c, name):
        typer.secho(f"{c.name} does not have {name}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    save_character(c, path)
    typer.secho(f"Removed feat {name}", fg=typer.colors.GREEN)


@app.command("origin")
def origin_cmd(ctx: typer.Context, path: Path, name: str, ability: str = typer.Option(None)):
    try:
        c = load_character(path)
        apply_origin(c, _tables(ctx), name, chosen_ability=ability)
    except (RulesError, CharacterFileError) as e:
        _fail(e)
    save_character(c, path)
    typer.secho(f"Origin set to {name}", fg=typer.colors.GREEN)


@app.command("species")
def species_cmd(ctx: typer.Context, path: Path, name: str):
    try:
        c = load_character(path)
        apply_species(c, _tables(ctx), name)
    except (RulesError, CharacterFileError) as e:
        _fail(e)
    save_character(c, path)
    typer.secho(f"Species set to {name}", fg=typer.colors.GREEN)


@app.command("remove-source")
def remove_source(path: Path, source_type: str, source_name: str):
    """Reverse every benefit granted by one source."""
    c = _load(path)
    removed = BenefitRemover(c).remove_all_benefits(source_type, source_name)
    save_character(c, path)
    typer.echo(f"Reverted {len(removed)} benefit(s) from {source_type}: {source_name}")


@app.command("sources")
def sources_cmd(path: Path):
    """List every benefit source on the ledger and what it granted."""
    c = _load(path)
    for src in c.benefits.sources():
        entries = c.benefits.get_benefits_by_source(src.type, src.name)
        typer.echo(f"{src.tag}: " + ", ".join(e.description or e.target for e in entries))


@app.command("equip")
def equip_cmd(path: Path, item: str, off: bool = typer.Option(False, "--off", help="Unequip instead")):
    try:
        c = load_character(path)
        if off:
            unequip_item(c, item)
        else:
            equip_item(c, item)
    except (RulesError, CharacterFileError) as e:
        _fail(e)
    save_character(c, path)
    typer.echo(f"AC {c.armor_class}")


@app.command("rest")
def rest_cmd(path: Path, type: str = typer.Option("long", help="long|short")):
    c = _load(path)
    if type == "long":
        info = long_rest(c)
    elif type == "short":
        info = short_rest(c)
    else:
        raise typer.BadParameter("type must be 'long' or 'short'")
    save_character(c, path)
    typer.echo(f"{type.title()} rest: {info}")


@app.command("show")
def show(
    path: Path,
    md: Optional[Path] = typer.Option(None, help="Also write a Markdown sheet"),
    show_zero_slots: bool = typer.Option(False),
):
    c = _load(path)
    render_console(c, show_zero_slots=show_zero_slots)
    if md:
        save_markdown(c, md)
        typer.echo(f"Wrote {md}")


def main() -> None:
    load_env()
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
