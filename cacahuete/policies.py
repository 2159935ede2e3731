from __future__ import annotations

from datetime import datetime, timezone

from flask import request
from flask.views import MethodView

from .render import render_page
from .services.guards import run_startup_guards
from .services.store import RecordStore
from .settings import get_settings


class StartupGuardMixin(MethodView):
    """
    Runs the expiration and secret-reset guards before every handler.
    When one fires, its terminal screen is the whole response.
    """
    def dispatch_request(self, *args, **kwargs):
        self.settings = get_settings()
        self.store = RecordStore(self.settings.storage_key)

        screen = run_startup_guards(
            self.store,
            self.settings,
            now=datetime.now(timezone.utc),
            reset_param=request.args.get("reset"),
        )
        if screen is not None:
            return render_page(screen, self.store, self.settings)

        return super().dispatch_request(*args, **kwargs)
