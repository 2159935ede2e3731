from __future__ import annotations

from flask import Blueprint, request

from ..policies import StartupGuardMixin
from ..render import render_page
from ..services.draw import Cancel, ChooseCandidate, Confirm, PickGiver, Screen, transition


draw_bp = Blueprint("draw", __name__)


def _field(name: str) -> str:
    return (request.form.get(name) or "").strip()


class DrawView(StartupGuardMixin):
    def advance(self, screen: Screen, event) -> str:
        next_screen = transition(screen, event, self.store, self.settings.registry)
        return render_page(next_screen, self.store, self.settings)

    def current_screen(self) -> Screen:
        """
        Rebuild the screen the posted form was rendered on.
        A giver we do not know sends the user back Home.
        """
        giver = _field("giver")
        if giver not in self.settings.registry:
            return Screen.home()
        if "selected" in request.form:
            return Screen.confirmation(giver, _field("selected"))
        return Screen.selection(giver)


class HomeView(DrawView):
    def get(self):
        return render_page(Screen.home(), self.store, self.settings)


class PickView(DrawView):
    def post(self):
        return self.advance(Screen.home(), PickGiver(_field("giver")))


class ChooseView(DrawView):
    def post(self):
        return self.advance(self.current_screen(), ChooseCandidate(_field("candidate")))


class ConfirmView(DrawView):
    def post(self):
        return self.advance(self.current_screen(), Confirm())


class CancelView(DrawView):
    def post(self):
        return self.advance(self.current_screen(), Cancel())


draw_bp.add_url_rule("/", view_func=HomeView.as_view("home"))
draw_bp.add_url_rule("/pick", view_func=PickView.as_view("pick"), methods=["POST"])
draw_bp.add_url_rule("/choose", view_func=ChooseView.as_view("choose"), methods=["POST"])
draw_bp.add_url_rule("/confirm", view_func=ConfirmView.as_view("confirm"), methods=["POST"])
draw_bp.add_url_rule("/cancel", view_func=CancelView.as_view("cancel"), methods=["POST"])
