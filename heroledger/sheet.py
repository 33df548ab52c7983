from __future__ import annotations

from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from heroledger.engine.derived import calculate_armor_class
from heroledger.models.abilities import ABILITY_ORDER
from heroledger.models.character import Character


def format_mod(n: int) -> str:
    return f"+{n}" if n >= 0 else str(n)


def _csv(items: Iterable[str]) -> str:
    items = list(items)
    return ", ".join(items) if items else "—"


def _pkg_version() -> str:
    try:
        return pkg_version("heroledger")
    except PackageNotFoundError:  # pragma: no cover - local checkout
        return "0.0"


def slots_list(c: Character, show_zero: bool = False) -> list[str]:
    out: list[str] = []
    for i in range(1, 10):
        pool = c.spellbook.slots.pool(i)
        if pool.maximum or show_zero:
            out.append(f"L{i}:{pool.current}/{pool.maximum}")
    pact = c.spellbook.pact_magic
    if pact.slots:
        out.append(f"Pact L{pact.slot_level}:{pact.current}/{pact.slots}")
    return out


def ability_block(c: Character) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    for a in ABILITY_ORDER:
        score = c.ability_scores.get(a)
        t.add_row(f"[bold]{a.abbr.upper()}[/]", f"{score:>2} ({format_mod(c.ability_mod(a))})")
    return t


def prof_block(c: Character) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    t.add_row("Prof.", format_mod(c.proficiency_bonus))
    t.add_row("Saves", _csv(a.value for a in c.saving_throws))
    skills = []
    for e in c.skills.entries:
        if e.proficiency:
            skills.append(e.skill.value + ("*" if e.proficiency == 2 else ""))
    t.add_row("Skills", _csv(skills))
    t.add_row("Armor", _csv(c.armor_proficiencies))
    t.add_row("Weapons", _csv(c.weapon_proficiencies))
    t.add_row("Tools", _csv(c.tool_proficiencies))
    t.add_row("Languages", _csv(c.languages))
    return t


def defense_block(c: Character) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    t.add_row("AC", str(c.armor_class))
    t.add_row("HP", f"{c.current_hp}/{c.max_hp}" + (f" (+{c.temp_hp} temp)" if c.temp_hp else ""))
    t.add_row("Init.", format_mod(c.initiative))
    t.add_row("Speed", f"{c.current_speed} ft")
    t.add_row("Passive Perception", str(c.passive_score("Perception")))
    if c.darkvision:
        t.add_row("Darkvision", f"{c.darkvision} ft")
    if c.resistances:
        t.add_row("Resistances", _csv(c.resistances))
    return t


def features_block(c: Character) -> Table:
    t = Table(box=None, show_header=True, expand=False)
    t.add_column("Feature")
    t.add_column("Uses")
    t.add_column("Source")
    if not c.features:
        t.add_row("—", "", "")
        return t
    for f in c.features:
        uses = f"{f.current_uses}/{f.max_uses} ({f.rest_type.value})" if f.max_uses else ""
        t.add_row(f.name, uses, f.source)
    return t


def spellcasting_block(c: Character, show_zero: bool = False) -> Table:
    t = Table(box=None, show_header=False, expand=False)
    book = c.spellbook
    if book.spellcasting_ability is not None:
        t.add_row("Ability", book.spellcasting_ability.value)
        t.add_row("Spell Save DC", str(book.spell_save_dc))
        t.add_row("Spell Attack", format_mod(book.spell_attack_bonus))
        if book.is_prepared_caster:
            t.add_row("Max Prepared", str(book.max_prepared_spells))
        t.add_row("Cantrips Known", str(book.cantrips_known))
    parts = slots_list(c, show_zero)
    t.add_row("Slots", ", ".join(parts) if parts else "—")
    if c.species_spells:
        t.add_row("Innate", ", ".join(c.species_spells))
    return t


def inventory_block(c: Character) -> Table:
    t = Table(box=None, show_header=True, expand=False)
    t.add_column("Item")
    t.add_column("Qty")
    t.add_column("")
    for it in c.inventory.items:
        t.add_row(it.name, str(it.quantity), "equipped" if it.equipped else "")
    t.add_row("Gold", f"{c.inventory.gold:g}", "")
    return t


def render_console(c: Character, show_zero_slots: bool = False, console: Console | None = None) -> None:
    con = console or Console()
    header = f"[bold]{c.name}[/] — {c.class_summary or 'No Class'}  L{c.level}"
    con.rule(header)
    ac_info = calculate_armor_class(c)
    line = f"AC {ac_info['ac']} — {', '.join(ac_info['components'])}"
    if ac_info["notes"]:
        line += "; " + "; ".join(ac_info["notes"])
    con.print(line)
    con.print(Panel(ability_block(c), title="Abilities", border_style="cyan"))
    con.print(Panel(prof_block(c), title="Proficiencies", border_style="magenta"))
    con.print(Panel(defense_block(c), title="Defense", border_style="green"))
    con.print(Panel(features_block(c), title="Features", border_style="red"))
    con.print(Panel(spellcasting_block(c, show_zero_slots), title="Spellcasting", border_style="yellow"))
    con.print(Panel(inventory_block(c), title="Inventory", border_style="blue"))


MD_HEADER = (
    "# {name}\n\n"
    "**Class:** {klass}  \n"
    "**Level:** {level}  \n"
    "**AC:** {ac}  \n"
    "**HP:** {hp}\n\n"
)


def to_markdown(c: Character) -> str:
    out = MD_HEADER.format(
        name=c.name,
        klass=c.class_summary or "No Class",
        level=c.level,
        ac=c.armor_class,
        hp=f"{c.current_hp}/{c.max_hp}",
    )
    out += "## Abilities\n\n"
    for a in ABILITY_ORDER:
        out += f"- **{a.abbr.upper()}**: {c.ability_scores.get(a)} ({format_mod(c.ability_mod(a))})\n"
    out += "\n## Features\n\n"
    for f in c.features or []:
        uses = f" ({f.current_uses}/{f.max_uses}, {f.rest_type.value})" if f.max_uses else ""
        out += f"- {f.name}{uses}\n"
    if not c.features:
        out += "- —\n"
    out += "\n## Spellcasting\n\n"
    parts = slots_list(c)
    out += f"- **Slots**: {', '.join(parts) if parts else '—'}\n"
    out += "\n## Sources\n\n"
    for src in c.benefits.sources():
        out += f"- {src.tag} ({len(c.benefits.get_benefits_by_source(src.type, src.name))})\n"
    if not len(c.benefits):
        out += "- —\n"
    out += f"\n---\n\nVERSION: {_pkg_version()}\n"
    return out


def save_markdown(c: Character, path: Path) -> Path:
    path.write_text(to_markdown(c), encoding="utf-8")
    return path
