# screens/library_history/page.py
from __future__ import annotations

from core.policy import require_page
from screens import crud_page


@require_page("Library History")
def render():
    crud_page.render("library")


# Wrap the call to prevent side-effects when imported by other modules
if __name__ == "__main__":
    render()
