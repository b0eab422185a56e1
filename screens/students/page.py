# screens/students/page.py
from __future__ import annotations

from core.policy import require_page
from screens import crud_page


@require_page("Students")
def render():
    crud_page.render("students")


# Wrap the call to prevent side-effects when imported by other modules
if __name__ == "__main__":
    render()
