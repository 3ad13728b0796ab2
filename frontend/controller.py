# frontend/controller.py
"""
Page controllers for the dealership site

Each controller keeps its own view state, talks to the backend through a
DealershipAPI and reports user-facing outcomes through a notifier callback
(the toast in the browser). Admin-only actions read the credential from the
AdminSession they were given.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from frontend.api_client import APIError, DealershipAPI
from frontend.formatting import (
    DASH,
    STATUS_RESERVED,
    counter_frames,
    escape_html,
    format_km,
    format_price,
    format_today,
    normalize_status,
    to_number,
)
from frontend.session import AdminSession

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]
REQUEST_ERRORS = (APIError, requests.RequestException)

FILTER_ALL = "all"
DEFAULT_FUEL = "Benzin"
DEFAULT_GEARBOX = "Manuell"

CAR_PLACEHOLDER = (
    '<div class="car-card-image-placeholder">'
    '<svg viewBox="0 0 200 80" xmlns="http://www.w3.org/2000/svg">'
    '<path d="M20 55 L30 30 Q50 18 100 16 Q150 14 170 30 L180 55 Z"/>'
    '<circle cx="45" cy="66" r="11"/><circle cx="155" cy="66" r="11"/>'
    '<path d="M8 55 L192 55"/></svg>'
    '<span class="car-card-image-note">Kein Foto vorhanden</span>'
    '</div>'
)


def log_toast(message: str) -> None:
    logger.info(f"Toast: {message}")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First non-empty value among the current and legacy (German) field names"""
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return default


def _text(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()


def _spec_cell(value: str, label: str) -> str:
    return (
        f'<div class="car-spec"><div class="car-spec-val">{value}</div>'
        f'<div class="car-spec-key">{label}</div></div>'
    )


def status_badge(status: str):
    if status == STATUS_RESERVED:
        return "badge-reserviert", "Reserviert"
    return "badge-verkauf", "Zum Verkauf"


def build_car_payload(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn the inventory editor's raw field values into an API payload"""
    return {
        "make": _text(form, "make"),
        "model": _text(form, "model"),
        "year": to_number(form.get("year")),
        "km": to_number(form.get("km")),
        "fuel": form.get("fuel") or None,
        "gearbox": form.get("gearbox") or None,
        "price": to_number(form.get("price")),
        "status": normalize_status(form.get("status")),
        "image_url": _text(form, "image_url") or None,
        "description": _text(form, "description") or None,
        "willhaben_url": _text(form, "willhaben_url") or None,
    }


class AdminLoginController:
    """Login dialog plus the Ctrl+Shift+A shortcut"""

    def __init__(self, api: DealershipAPI, session: AdminSession, notify: Notifier = log_toast):
        self.api = api
        self.session = session
        self.notify = notify
        self.modal_open = False
        self.error_message: Optional[str] = None

    @property
    def admin_controls_visible(self) -> bool:
        return self.session.is_active()

    def open(self) -> None:
        self.error_message = None
        self.modal_open = True

    def close(self) -> None:
        self.modal_open = False

    def logout(self) -> None:
        self.session.end()
        self.notify("Admin abgemeldet")

    def toggle(self) -> None:
        """Keyboard shortcut: quick logout when active, otherwise show the dialog"""
        if self.session.is_active():
            self.logout()
        else:
            self.open()

    def submit(self, password: str) -> bool:
        try:
            resp = self.api.admin_login(password)
        except requests.RequestException as e:
            logger.warning(f"Admin login request failed: {e}")
            self.error_message = "Login fehlgeschlagen."
            return False

        if not resp or not resp.get("token"):
            self.error_message = "Falsches Passwort."
            return False

        self.session.start(resp["token"], resp.get("expiresAt") or 0)
        self.close()
        self.notify("✓ Admin aktiv")
        return True


class InventoryController:
    """In-memory inventory view with filter, detail dialog and admin editor"""

    def __init__(self, api: DealershipAPI, session: AdminSession, notify: Notifier = log_toast):
        self.api = api
        self.session = session
        self.notify = notify
        self.cars: List[Dict[str, Any]] = []
        self.active_filter = FILTER_ALL
        self.editing_id: Optional[str] = None
        self.current_car_id: Optional[str] = None
        self.editor_open = False
        self.detail_open = False
        self.detail_title = ""
        self.last_vehicle_count: Optional[int] = None

    # ── Loading ─────────────────────────────────────────────────────────────

    def refresh(self) -> bool:
        """Reload the inventory; on failure the previous list stays on screen"""
        try:
            cars = self.api.get_cars()
        except REQUEST_ERRORS as e:
            logger.warning(f"Loading cars failed: {e}")
            self.notify("⚠ Fahrzeuge konnten nicht geladen werden")
            return False

        self.cars = [
            {**car, "status": normalize_status(_first(car, "status", "typ"))}
            for car in cars
        ]
        return True

    def find(self, car_id) -> Optional[Dict[str, Any]]:
        for car in self.cars:
            if str(car.get("id")) == str(car_id):
                return car
        return None

    # ── Rendering ───────────────────────────────────────────────────────────

    def set_filter(self, name: Optional[str]) -> None:
        self.active_filter = name or FILTER_ALL

    def visible_cars(self) -> List[Dict[str, Any]]:
        if self.active_filter == FILTER_ALL:
            return list(self.cars)
        return [car for car in self.cars if car["status"] == self.active_filter]

    def render_card(self, car: Mapping[str, Any], index: int = 0) -> str:
        badge_class, badge_text = status_badge(normalize_status(car.get("status")))
        make = escape_html(_first(car, "make", "marke", default=DASH))
        model = escape_html(_first(car, "model", "modell", default=DASH))
        fuel = escape_html(_first(car, "fuel", "kraftstoff", default=DASH))
        gearbox = escape_html(_first(car, "gearbox", "getriebe", default=DASH))
        year = escape_html(_first(car, "year", "jahr", default=DASH))
        image_url = _first(car, "image_url", "bild", default="")

        if image_url:
            image = (
                f'<img class="car-img" src="{escape_html(image_url)}" '
                f'alt="{make} {model}" loading="lazy">'
            )
        else:
            image = CAR_PLACEHOLDER

        specs = "".join([
            _spec_cell(year, "Baujahr"),
            _spec_cell(format_km(car.get("km")), "Kilometerstand"),
            _spec_cell(fuel, "Kraftstoff"),
            _spec_cell(gearbox, "Getriebe"),
        ])
        return (
            f'<div class="car-card" style="animation-delay:{index * 0.08:.2f}s">'
            f'<div class="car-card-image"><span class="car-badge {badge_class}">{badge_text}</span>{image}</div>'
            f'<div class="car-card-body">'
            f'<div class="car-card-make">{make}</div>'
            f'<div class="car-card-model">{model}</div>'
            f'<div class="car-card-specs">{specs}</div>'
            f'<div class="car-card-footer"><div>'
            f'<div class="car-price">{format_price(_first(car, "price", "preis"))}</div>'
            f'<div class="car-price-label">Preis</div></div>'
            f'<button class="car-detail-btn" data-id="{escape_html(car.get("id"))}">Details →</button>'
            f'</div></div></div>'
        )

    def render_cards(self) -> List[str]:
        return [self.render_card(car, i) for i, car in enumerate(self.visible_cars())]

    def open_detail(self, car_id) -> Optional[str]:
        """Select a car and return the detail dialog body, or None if unknown"""
        car = self.find(car_id)
        if car is None:
            return None

        self.current_car_id = str(car_id)
        _, badge_text = status_badge(car["status"])
        make = _first(car, "make", "marke", default="")
        model = _first(car, "model", "modell", default="")
        description = _first(car, "description", "beschreibung", default="")
        image_url = _first(car, "image_url", "bild", default="")
        listing_url = _first(car, "willhaben_url", "willhaben", default="")

        parts = []
        if image_url:
            parts.append(f'<div class="detail-image"><img src="{escape_html(image_url)}" alt="" loading="lazy"></div>')
        parts.append('<div class="detail-specs">' + "".join([
            _spec_cell(escape_html(make or DASH), "Marke"),
            _spec_cell(escape_html(model or DASH), "Modell"),
            _spec_cell(escape_html(_first(car, "year", "jahr", default=DASH)), "Baujahr"),
            _spec_cell(format_km(car.get("km")), "Kilometerstand"),
            _spec_cell(escape_html(_first(car, "fuel", "kraftstoff", default=DASH)), "Kraftstoff"),
            _spec_cell(escape_html(_first(car, "gearbox", "getriebe", default=DASH)), "Getriebe"),
            _spec_cell(format_price(_first(car, "price", "preis")), "Preis"),
            _spec_cell(badge_text, "Status"),
        ]) + "</div>")
        if description:
            parts.append(f'<div class="detail-description">{escape_html(description).replace(chr(10), "<br>")}</div>')
        if listing_url:
            parts.append(
                f'<a class="btn-primary" href="{escape_html(listing_url)}" target="_blank" '
                f'rel="noopener">Auf Willhaben ansehen →</a>'
            )

        self.detail_title = f"{make} {model}".strip() or "Fahrzeugdetails"
        self.detail_open = True
        return "".join(parts)

    def close_detail(self) -> None:
        self.detail_open = False

    def vehicle_counter(self, animate: bool = True, today=None) -> Dict[str, Any]:
        """Frames for the hero vehicle counter plus its 'Stand' caption"""
        target = len(self.cars)
        previous = self.last_vehicle_count
        if previous is None:
            frames = counter_frames(0, target, 650) if animate and target > 0 else [target]
        else:
            frames = counter_frames(previous, target, 450) if animate else [target]
        self.last_vehicle_count = target
        return {"frames": frames, "meta": f"Stand: {format_today(today)}"}

    # ── Admin editor ────────────────────────────────────────────────────────

    def open_new_editor(self) -> bool:
        if not self.session.is_active():
            self.notify("Admin Login nötig (Ctrl+Shift+A)")
            return False
        self.editing_id = None
        self.editor_open = True
        return True

    def open_edit_editor(self) -> Optional[Dict[str, Any]]:
        """Prefill values for editing the car shown in the detail dialog"""
        if not self.session.is_active():
            return None
        car = self.find(self.current_car_id)
        if car is None:
            return None

        self.close_detail()
        self.editing_id = str(car["id"])
        self.editor_open = True
        return {
            "make": car.get("make") or "",
            "model": car.get("model") or "",
            "year": car.get("year") if car.get("year") is not None else "",
            "km": car.get("km") if car.get("km") is not None else "",
            "fuel": car.get("fuel") or DEFAULT_FUEL,
            "gearbox": car.get("gearbox") or DEFAULT_GEARBOX,
            "price": car.get("price") if car.get("price") is not None else "",
            "status": normalize_status(car.get("status")),
            "image_url": car.get("image_url") or "",
            "willhaben_url": car.get("willhaben_url") or "",
            "description": car.get("description") or "",
        }

    def close_editor(self) -> None:
        self.editor_open = False

    def submit_editor(self, form: Mapping[str, Any]) -> bool:
        if not self.session.is_active():
            self.notify("Admin Login nötig")
            return False

        token = self.session.token
        payload = build_car_payload(form)
        try:
            if self.editing_id:
                self.api.update_car(self.editing_id, payload, token)
                self.notify("✓ Fahrzeug aktualisiert")
            else:
                self.api.create_car(payload, token)
                self.notify("✓ Fahrzeug hinzugefügt")
        except REQUEST_ERRORS as e:
            logger.warning(f"Saving car failed: {e}")
            self.notify("⚠ Speichern fehlgeschlagen")
            return False

        self.close_editor()
        self.editing_id = None
        self.refresh()
        return True

    def delete_current(self) -> bool:
        if not self.session.is_active() or not self.current_car_id:
            return False

        try:
            self.api.delete_car(self.current_car_id, self.session.token)
        except REQUEST_ERRORS as e:
            logger.warning(f"Deleting car {self.current_car_id} failed: {e}")
            self.notify("⚠ Löschen fehlgeschlagen")
            return False

        self.close_detail()
        self.notify("✓ Fahrzeug gelöscht")
        self.refresh()
        return True


class _SubmissionForm:
    """Shared submit flow of the public contact and valuation forms"""

    success_toast = ""

    def __init__(self, api: DealershipAPI, notify: Notifier = log_toast):
        self.api = api
        self.notify = notify
        self.submitted = False

    def build_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def send(self, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def submit(self, form: Mapping[str, Any]) -> bool:
        try:
            self.send(self.build_payload(form))
        except REQUEST_ERRORS as e:
            logger.warning(f"{type(self).__name__} submit failed: {e}")
            self.notify("⚠ Senden fehlgeschlagen")
            return False

        self.submitted = True
        self.notify(self.success_toast)
        return True


class ContactFormController(_SubmissionForm):
    success_toast = "✓ Nachricht gesendet!"

    def build_payload(self, form):
        return {
            "vorname": form.get("vorname"),
            "nachname": form.get("nachname"),
            "email": form.get("email"),
            "telefon": form.get("telefon"),
            "nachricht": form.get("nachricht"),
            "submitted_at": _now_iso(),
        }

    def send(self, payload):
        self.api.submit_message(payload)


class ValuationFormController(_SubmissionForm):
    success_toast = "✓ Bewertungsanfrage eingegangen!"

    def build_payload(self, form):
        return {
            "marke": form.get("marke"),
            "modell": form.get("modell"),
            "jahr": to_number(form.get("jahr")),
            "km": to_number(form.get("km")),
            "kraftstoff": form.get("kraftstoff"),
            "zustand": form.get("zustand"),
            "kontakt": form.get("kontakt"),
            "anmerkung": form.get("anmerkung"),
            "submitted_at": _now_iso(),
        }

    def send(self, payload):
        self.api.submit_valuation(payload)
