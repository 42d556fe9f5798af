"""Simple Flask web interface for the pallet loading calculator."""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from flask import Flask, render_template, request

from .calculator import (
    CUSTOM_PALLET,
    build_input,
    calculate_load_plan,
    estimate_loose_boxes,
    serialise_plan,
)
from .models import PalletDimensions

logger = logging.getLogger(__name__)

app = Flask(__name__)

_PALLET_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("std", "Standard (120 × 100)"),
    ("euro", "Euro (120 × 80)"),
    ("us", "US (122 × 102)"),
    ("custom", "Custom"),
)

_UNIT_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("mm", "mm"),
    ("cm", "cm"),
    ("inch", "in"),
)

_DEFAULT_FORM = {
    "box_length": "",
    "box_width": "",
    "box_height": "",
    "unit": "cm",
    "pallet_preset": "std",
    "pallet_length": "120",
    "pallet_width": "100",
    "pallet_base_height": "15",
}


def _form_to_raw(form_values: Dict[str, str]) -> Dict[str, Any]:
    return {
        "box": {
            "length": form_values.get("box_length"),
            "width": form_values.get("box_width"),
            "height": form_values.get("box_height"),
            "unit": form_values.get("unit") or "cm",
        },
        "pallet": {
            "preset": form_values.get("pallet_preset") or "std",
            "length": form_values.get("pallet_length"),
            "width": form_values.get("pallet_width"),
            "base_height": form_values.get("pallet_base_height"),
        },
    }


def _pallet_fields(pallet: PalletDimensions) -> Dict[str, str]:
    return {
        "pallet_length": f"{pallet.length_cm:g}",
        "pallet_width": f"{pallet.width_cm:g}",
        "pallet_base_height": f"{pallet.base_height_cm:g}",
    }


@app.route("/", methods=["GET", "POST"])
def index():
    form_values = dict(_DEFAULT_FORM)
    error: str | None = None
    result: Dict[str, Any] | None = None

    if request.method == "POST":
        form_values.update(request.form.to_dict())
        try:
            data = build_input(_form_to_raw(form_values))
        except ValueError as exc:
            logger.debug("Rejected form input: %s", exc)
            error = str(exc)
        else:
            if data.pallet_preset != CUSTOM_PALLET:
                form_values.update(_pallet_fields(data.pallet))
            plan = calculate_load_plan(data.box, data.pallet)
            result = serialise_plan(plan, estimate_loose_boxes(data.box))

    return render_template(
        "index.html",
        form=form_values,
        pallet_options=_PALLET_OPTIONS,
        unit_options=_UNIT_OPTIONS,
        result=result,
        error=error,
    )


if __name__ == "__main__":
    app.run(debug=True)
