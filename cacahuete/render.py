"""
Screen rendering.

``render`` is a pure function from a screen, the current persisted state and
the settings to a ``View`` tree. The template only walks that tree; it never
looks at the store or the screen itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from flask import render_template

from .services.draw import Screen, ScreenKind
from .services.store import PersistedState, RecordStore
from .settings import DrawSettings


SELECTION_ERROR = "Ce choix n’est pas possible. Merci de choisir une autre personne."


@dataclass(frozen=True)
class Action:
    label: str
    endpoint: str
    fields: tuple[tuple[str, str], ...] = ()
    method: str = "post"
    style: str = ""


@dataclass(frozen=True)
class View:
    kind: ScreenKind
    title: str
    emoji: str = ""
    subtitle: str = ""
    counter: Optional[str] = None
    section_title: str = ""
    paragraphs: tuple[str, ...] = ()
    error: Optional[str] = None
    actions: tuple[Action, ...] = ()
    footer: str = ""
    final: bool = False


def counter_text(state: PersistedState, settings: DrawSettings) -> str:
    return f"{state.completed_count} / {len(settings.registry)} participants ont déjà encodé leur cacahuète."


def _home(state: PersistedState, settings: DrawSettings) -> View:
    return View(
        kind=ScreenKind.HOME,
        title="Cacahuète de Noël",
        emoji="🎁",
        subtitle="Clique sur ton prénom pour réaliser ton tirage.",
        counter=counter_text(state, settings),
        section_title="Qui es-tu ?",
        paragraphs=("Chaque membre de la famille réalise son tirage une seule fois sur cet appareil.",),
        actions=tuple(
            Action(label=name, endpoint="draw.pick", fields=(("giver", name),))
            for name in settings.registry
        ),
        footer="Les informations restent uniquement sur cet appareil et ne peuvent pas être consultées ensuite.",
    )


def _selection(screen: Screen, state: PersistedState, settings: DrawSettings) -> View:
    return View(
        kind=ScreenKind.SELECTION,
        title="Ton tirage",
        emoji="✨",
        subtitle=f"Tu es : {screen.giver}",
        counter=counter_text(state, settings),
        section_title="Choisis une personne à gâter 🎄",
        paragraphs=("Tu ne peux pas te tirer toi-même, ni quelqu'un déjà attribué sur cet appareil.",),
        error=SELECTION_ERROR if screen.error else None,
        actions=tuple(
            Action(label=name, endpoint="draw.choose", fields=(("giver", screen.giver), ("candidate", name)))
            for name in settings.registry
        ),
    )


def _confirmation(screen: Screen, state: PersistedState, settings: DrawSettings) -> View:
    fields = (("giver", screen.giver), ("selected", screen.selected))
    return View(
        kind=ScreenKind.CONFIRMATION,
        title="Confirmation",
        emoji="✅",
        subtitle="Vérifie ton tirage avant de valider.",
        counter=counter_text(state, settings),
        paragraphs=(
            f"Tu es : {screen.giver}",
            f"Tu as sélectionné : {screen.selected}",
        ),
        actions=(
            Action(label="Confirmer", endpoint="draw.confirm", fields=fields, style="primary"),
            Action(label="Annuler", endpoint="draw.cancel", fields=fields, style="secondary"),
        ),
        footer="Une fois confirmé, ton tirage ne pourra plus être revu ou modifié.",
    )


def _thank_you() -> View:
    return View(
        kind=ScreenKind.THANK_YOU,
        title="🎅 Merci !",
        paragraphs=(
            "Ton tirage a été enregistré sur cet appareil. Tu peux maintenant fermer cette page "
            "et garder le secret jusqu’au réveillon.",
        ),
        footer="Il n’est pas possible de consulter ou modifier les tirages par la suite.",
        final=True,
    )


def _expired(settings: DrawSettings) -> View:
    # The last valid day is the one just before the cutoff instant.
    last_day = (settings.expires_at - timedelta(seconds=1)).strftime("%d/%m/%Y")
    return View(
        kind=ScreenKind.EXPIRED,
        title="🎄 Cacahuète expirée",
        paragraphs=(
            f"Cette application est expirée depuis le {last_day}. Toutes les données locales "
            "ont été supprimées. Merci d'avoir participé !",
        ),
        final=True,
    )


def _reset_done() -> View:
    return View(
        kind=ScreenKind.RESET_DONE,
        title="🔄 Réinitialisation effectuée",
        paragraphs=(
            "Toutes les données locales ont été supprimées pour cette cacahuète. "
            "Vous pouvez recharger la page pour recommencer les tests.",
        ),
        actions=(Action(label="Recharger la page", endpoint="draw.home", method="get", style="primary"),),
        footer="Cette fonction de reset est réservée au créateur de la cacahuète.",
        final=True,
    )


def render(screen: Screen, state: PersistedState, settings: DrawSettings) -> View:
    if screen.kind is ScreenKind.HOME:
        return _home(state, settings)
    if screen.kind is ScreenKind.SELECTION:
        return _selection(screen, state, settings)
    if screen.kind is ScreenKind.CONFIRMATION:
        return _confirmation(screen, state, settings)
    if screen.kind is ScreenKind.THANK_YOU:
        return _thank_you()
    if screen.kind is ScreenKind.EXPIRED:
        return _expired(settings)
    return _reset_done()


def render_page(screen: Screen, store: RecordStore, settings: DrawSettings) -> str:
    """Load fresh state and turn the screen into a full HTML page."""
    view = render(screen, store.load(), settings)
    return render_template("screen.html", view=view)
