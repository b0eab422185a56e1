# screens/fees/page.py
from __future__ import annotations

from core.policy import require_page
from screens import crud_page


@require_page("Fees")
def render():
    crud_page.render("fees")


# Wrap the call to prevent side-effects when imported by other modules
if __name__ == "__main__":
    render()
