# screens/staff/page.py
from __future__ import annotations

from core.policy import require_page
from screens import crud_page


@require_page("Staff")
def render():
    crud_page.render("staff")


# Wrap the call to prevent side-effects when imported by other modules
if __name__ == "__main__":
    render()
